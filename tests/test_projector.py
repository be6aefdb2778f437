"""
Tests for shadow projection and the max-alpha blend.
"""

from dataclasses import replace

import numpy as np
import pytest

from shadowbaker import PixelBuffer, compute_canvas_geometry, project_shadow, InvalidBufferError
from shadowbaker.projector import blend_max_alpha


class TestBlendMaxAlpha:
    """Tests for the max-alpha proportional blend rule."""

    def test_onto_transparent_takes_color(self):
        existing = np.zeros((1, 4), dtype=np.float32)
        result = blend_max_alpha(existing, (1.0, 0.5, 0.0, 1.0), np.array([0.6], dtype=np.float32))
        np.testing.assert_allclose(result[0], [1.0, 0.5, 0.0, 0.6], atol=1e-6)

    def test_weaker_write_keeps_alpha(self):
        """A weaker write keeps the stronger alpha and blends color proportionally."""
        existing = np.array([[1.0, 1.0, 1.0, 0.8]], dtype=np.float32)
        result = blend_max_alpha(existing, (0.0, 0.0, 0.0, 1.0), np.array([0.4], dtype=np.float32))
        np.testing.assert_allclose(result[0], [0.5, 0.5, 0.5, 0.8], atol=1e-6)

    def test_stronger_write_replaces(self):
        existing = np.array([[1.0, 1.0, 1.0, 0.2]], dtype=np.float32)
        result = blend_max_alpha(existing, (0.0, 0.0, 0.0, 1.0), np.array([0.9], dtype=np.float32))
        np.testing.assert_allclose(result[0], [0.0, 0.0, 0.0, 0.9], atol=1e-6)

    def test_idempotent(self):
        existing = np.zeros((1, 4), dtype=np.float32)
        alpha = np.array([0.7], dtype=np.float32)
        once = blend_max_alpha(existing, (0.3, 0.3, 0.3, 1.0), alpha)
        twice = blend_max_alpha(once, (0.3, 0.3, 0.3, 1.0), alpha)
        np.testing.assert_allclose(once, twice, atol=1e-6)

    def test_near_zero_alpha_keeps_existing_color(self):
        existing = np.array([[0.2, 0.4, 0.6, 0.0]], dtype=np.float32)
        result = blend_max_alpha(existing, (1.0, 1.0, 1.0, 1.0), np.array([0.00001], dtype=np.float32))
        np.testing.assert_allclose(result[0, :3], [0.2, 0.4, 0.6], atol=1e-6)


class TestProjectShadow:
    """Tests for project_shadow."""

    def test_projects_at_shadow_origin(self, opaque_square):
        geometry = compute_canvas_geometry(4, 4, 0.0, 3.0, padding=1)
        layer = project_shadow(opaque_square, geometry, (0.0, 0.0, 1.0, 1.0), 1.0)
        assert layer.size == (geometry.width, geometry.height)
        ox, oy = geometry.shadow_origin
        assert ox == 4 and oy == 1
        assert np.all(layer.alpha[oy:oy + 4, ox:ox + 4] == 1.0)
        assert layer.alpha.sum() == pytest.approx(16.0)
        assert layer.get_pixel(ox, oy) == pytest.approx((0.0, 0.0, 1.0, 1.0))

    def test_alpha_scaled_by_opacity_and_color_alpha(self, soft_sprite):
        geometry = compute_canvas_geometry(soft_sprite.width, soft_sprite.height, 0.0, 0.0)
        layer = project_shadow(soft_sprite, geometry, (0.0, 0.0, 0.0, 0.5), 0.8)
        np.testing.assert_allclose(layer.alpha, soft_sprite.alpha * 0.4, atol=1e-6)

    def test_transparent_source_pixels_are_skipped(self, centered_dot):
        geometry = compute_canvas_geometry(32, 32, 0.0, 0.0)
        layer = project_shadow(centered_dot, geometry, (0.0, 0.0, 0.0, 1.0), 1.0)
        assert int(np.count_nonzero(layer.alpha)) == 16
        assert layer.get_pixel(0, 0) == (0.0, 0.0, 0.0, 0.0)

    def test_source_color_is_ignored(self, centered_dot):
        """Only the source alpha matters, the shadow takes the shadow color."""
        geometry = compute_canvas_geometry(32, 32, 0.0, 0.0)
        layer = project_shadow(centered_dot, geometry, (0.0, 1.0, 0.0, 1.0), 1.0)
        assert layer.get_pixel(15, 15) == pytest.approx((0.0, 1.0, 0.0, 1.0))

    def test_clips_outside_canvas(self, opaque_square):
        """A geometry whose shadow leaves the canvas only writes the overlap."""
        geometry = compute_canvas_geometry(4, 4, 0.0, 0.0)
        shifted = replace(geometry, shadow_origin=(2, -1))
        layer = project_shadow(opaque_square, shifted, (0.0, 0.0, 0.0, 1.0), 1.0)
        assert layer.alpha.sum() == pytest.approx(2 * 3)
        assert layer.alpha[0:3, 2:4].min() == 1.0

    def test_projects_into_existing_buffer(self, opaque_square):
        """Writing into a prepared buffer applies the max-alpha rule per cell."""
        geometry = compute_canvas_geometry(4, 4, 0.0, 0.0)
        target = PixelBuffer.filled(4, 4, (1.0, 1.0, 1.0, 0.8))
        layer = project_shadow(opaque_square, geometry, (0.0, 0.0, 0.0, 1.0), 0.4, into=target)
        assert layer is target
        assert layer.get_pixel(2, 2) == pytest.approx((0.5, 0.5, 0.5, 0.8))

    def test_into_wrong_size(self, opaque_square):
        geometry = compute_canvas_geometry(4, 4, 0.0, 0.0, padding=1)
        with pytest.raises(InvalidBufferError):
            project_shadow(opaque_square, geometry, (0.0, 0.0, 0.0, 1.0), 1.0,
                           into=PixelBuffer.transparent(4, 4))

    def test_source_is_not_modified(self, soft_sprite):
        before = soft_sprite.copy()
        geometry = compute_canvas_geometry(10, 8, 45.0, 3.0, padding=2, blur_radius=1)
        project_shadow(soft_sprite, geometry, (0.0, 0.0, 0.0, 1.0), 1.0)
        assert soft_sprite == before

    def test_rgb_shadow_color_gets_opaque_alpha(self, opaque_square):
        geometry = compute_canvas_geometry(4, 4, 0.0, 0.0)
        layer = project_shadow(opaque_square, geometry, (0.0, 0.0, 0.0), 0.5)
        assert layer.get_pixel(1, 1) == pytest.approx((0.0, 0.0, 0.0, 0.5))

    def test_invalid_shadow_color(self, opaque_square):
        geometry = compute_canvas_geometry(4, 4, 0.0, 0.0)
        with pytest.raises(ValueError):
            project_shadow(opaque_square, geometry, (0.0, 0.0), 1.0)
