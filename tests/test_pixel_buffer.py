"""
Tests for PixelBuffer construction, access and conversion.
"""

import io

import numpy as np
import PIL.Image
import pytest

from shadowbaker import PixelBuffer, InvalidBufferError


class TestConstruction:
    """Tests for the PixelBuffer factories."""

    def test_transparent(self):
        buffer = PixelBuffer.transparent(3, 2)
        assert buffer.size == (3, 2)
        assert len(buffer) == 6
        assert np.all(buffer.pixels == 0.0)

    def test_filled(self):
        buffer = PixelBuffer.filled(2, 2, (0.1, 0.2, 0.3, 0.4))
        assert buffer.get_pixel(1, 1) == pytest.approx((0.1, 0.2, 0.3, 0.4))

    def test_from_flat_row_major(self):
        """Flat index y*width+x maps to pixel (x, y)."""
        colors = [(i / 10, 0.0, 0.0, 1.0) for i in range(6)]
        buffer = PixelBuffer.from_flat(3, 2, colors)
        assert buffer.get_pixel(2, 0)[0] == pytest.approx(0.2)
        assert buffer.get_pixel(0, 1)[0] == pytest.approx(0.3)
        np.testing.assert_allclose(buffer.flat[4], colors[4])

    def test_from_flat_wrong_length(self):
        with pytest.raises(InvalidBufferError):
            PixelBuffer.from_flat(3, 2, [(0.0, 0.0, 0.0, 0.0)] * 5)

    def test_from_flat_empty(self):
        buffer = PixelBuffer.from_flat(0, 0, [])
        assert len(buffer) == 0
        assert buffer.is_empty()

    def test_invalid_shape(self):
        with pytest.raises(InvalidBufferError):
            PixelBuffer(np.zeros((4, 4, 3), dtype=np.float32))

    def test_from_uint8_rgb(self):
        """uint8 RGB is normalized and receives an opaque alpha."""
        data = np.full((2, 3, 3), [255, 0, 51], dtype=np.uint8)
        buffer = PixelBuffer.from_array(data)
        assert buffer.size == (3, 2)
        assert buffer.get_pixel(0, 0) == pytest.approx((1.0, 0.0, 0.2, 1.0))

    def test_from_array_copies(self):
        data = np.zeros((2, 2, 4), dtype=np.float32)
        buffer = PixelBuffer.from_array(data)
        data[0, 0] = 1.0
        assert buffer.get_pixel(0, 0) == (0.0, 0.0, 0.0, 0.0)

    def test_unsupported_dtype(self):
        with pytest.raises(InvalidBufferError):
            PixelBuffer.from_array(np.zeros((2, 2, 4), dtype=np.int32))


class TestConversion:
    """Tests for PIL, uint8 and PNG conversion."""

    def test_pil_roundtrip(self):
        image = PIL.Image.new("RGBA", (5, 4), (255, 128, 0, 64))
        buffer = PixelBuffer.from_pil(image)
        assert buffer.size == (5, 4)
        restored = buffer.to_pil()
        assert restored.size == (5, 4)
        assert restored.getpixel((2, 2)) == (255, 128, 0, 64)

    def test_to_array_is_a_copy(self):
        buffer = PixelBuffer.filled(3, 2, (0.25, 0.5, 0.75, 1.0))
        array = buffer.to_array()
        assert array.shape == (2, 3, 4)
        assert array.dtype == np.float32
        array[0, 0] = 0.0
        assert buffer.get_pixel(0, 0) == (0.25, 0.5, 0.75, 1.0)

    def test_pil_rgb_gets_alpha(self):
        image = PIL.Image.new("RGB", (2, 2), (10, 20, 30))
        buffer = PixelBuffer.from_pil(image)
        assert buffer.get_pixel(0, 0)[3] == 1.0

    def test_to_uint8_clips(self):
        buffer = PixelBuffer.filled(1, 1, (1.5, -0.5, 0.5, 1.0))
        assert buffer.to_uint8()[0, 0].tolist() == [255, 0, 128, 255]

    def test_encode_png(self):
        buffer = PixelBuffer.filled(3, 3, (0.0, 0.0, 0.0, 0.5))
        data = buffer.encode_png()
        assert data[:8] == b"\x89PNG\r\n\x1a\n"
        decoded = PIL.Image.open(io.BytesIO(data))
        assert decoded.mode == "RGBA"
        assert decoded.size == (3, 3)


class TestIdentity:
    """Tests for equality and fingerprints."""

    def test_equality(self):
        a = PixelBuffer.filled(2, 2, (0.5, 0.5, 0.5, 1.0))
        b = PixelBuffer.filled(2, 2, (0.5, 0.5, 0.5, 1.0))
        assert a == b
        b.set_pixel(0, 0, (0.0, 0.0, 0.0, 0.0))
        assert a != b

    def test_fingerprint_tracks_content(self):
        a = PixelBuffer.filled(2, 2, (0.5, 0.5, 0.5, 1.0))
        b = a.copy()
        assert a.fingerprint() == b.fingerprint()
        b.set_pixel(1, 1, (0.0, 0.0, 0.0, 1.0))
        assert a.fingerprint() != b.fingerprint()

    def test_fingerprint_tracks_dimensions(self):
        a = PixelBuffer.transparent(2, 3)
        b = PixelBuffer.transparent(3, 2)
        assert a.fingerprint() != b.fingerprint()
