"""
Drop shadow baker.

Builds a shadow layer behind a source image by:
1. Computing the canvas holding source and offset shadow
2. Projecting the source alpha, tinted with the shadow color
3. Blurring it with a separable Gaussian kernel
4. Remapping alpha by the spread amount (preview only, unless enabled for bakes)

The baked result is the shadow layer alone plus its placement metadata. The
preview stacks background, shadow and source into a single image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .blur import gaussian_blur
from .compositor import compose_preview
from .config import settings
from .geometry import CanvasGeometry, compute_canvas_geometry
from .parameters import DEFAULT_PREVIEW_BACKGROUND, ShadowParameters
from .pixel_buffer import PixelBuffer
from .projector import project_shadow
from .spread import apply_spread

logger = logging.getLogger(__name__)


@dataclass
class BakeResult:
    """Result of baking a drop shadow."""
    image: PixelBuffer  # Shadow layer, canvas sized
    geometry: CanvasGeometry
    source_size: tuple[int, int]  # (width, height) of the source image

    @property
    def pivot(self) -> tuple[float, float]:
        """Normalized position of the source center inside the shadow image."""
        return self.geometry.pivot

    @property
    def source_origin(self) -> tuple[int, int]:
        return self.geometry.source_origin

    @property
    def shadow_origin(self) -> tuple[int, int]:
        return self.geometry.shadow_origin

    @property
    def size_ratio(self) -> tuple[float, float]:
        """Scale of a placed shadow object relative to the source object."""
        return self.geometry.size_ratio(*self.source_size)

    def to_png_bytes(self) -> bytes:
        return self.image.encode_png()


class ShadowBaker:
    """
    Bakes drop shadows and renders previews for one parameter set.

    Example:
        >>> baker = ShadowBaker(ShadowParameters(distance=8, blur_radius=4))
        >>> result = baker.bake(source)
        >>> png = result.to_png_bytes()
        >>> preview = baker.preview(source, background=(1.0, 1.0, 1.0, 1.0))
    """

    def __init__(
        self,
        parameters: ShadowParameters | None = None,
        spread_in_bake: bool | None = None,
    ):
        """
        :param parameters: The shadow parameters. Defaults if omitted.
        :param spread_in_bake: Apply spread to baked shadows as well as to
            previews. Defaults to ``settings.SPREAD_IN_BAKE``.
        """
        self.parameters = parameters if parameters is not None else ShadowParameters()
        self.spread_in_bake = (
            settings.SPREAD_IN_BAKE if spread_in_bake is None else spread_in_bake
        )

    def geometry(self, source: PixelBuffer) -> CanvasGeometry:
        params = self.parameters
        return compute_canvas_geometry(
            source.width,
            source.height,
            angle=params.angle,
            distance=params.distance,
            padding=params.padding,
            blur_radius=params.blur_radius,
        )

    def shadow_layer(
        self,
        source: PixelBuffer,
        geometry: CanvasGeometry | None = None,
        apply_spread_remap: bool = False,
    ) -> PixelBuffer:
        """
        Project, blur and optionally spread the shadow of a source image.

        :param source: The source image
        :param geometry: Precomputed canvas geometry, computed if omitted
        :param apply_spread_remap: Remap alpha by the spread amount
        :return: The shadow layer, canvas sized
        """
        params = self.parameters
        if geometry is None:
            geometry = self.geometry(source)

        layer = project_shadow(source, geometry, params.shadow_color, params.opacity)
        layer = gaussian_blur(layer, params.blur_radius)
        if apply_spread_remap:
            layer = apply_spread(layer, params.spread)
        return layer

    def bake(self, source: PixelBuffer) -> BakeResult:
        """
        Bake the standalone shadow image of a source image.

        :param source: The source image
        :return: Shadow image with pivot and placement metadata
        """
        geometry = self.geometry(source)
        if self.parameters.spread > 0.0 and not self.spread_in_bake:
            logger.warning(
                "Spread %.2f is applied to previews only; the baked shadow "
                "is not spread. Enable spread_in_bake to match the preview.",
                self.parameters.spread,
            )
        image = self.shadow_layer(
            source, geometry, apply_spread_remap=self.spread_in_bake
        )
        logger.info(
            "Baked %dx%d shadow for %dx%d source, pivot (%.3f, %.3f)",
            geometry.width,
            geometry.height,
            source.width,
            source.height,
            *geometry.pivot,
        )
        return BakeResult(image=image, geometry=geometry, source_size=source.size)

    def preview(
        self,
        source: PixelBuffer,
        background: Sequence[float] = DEFAULT_PREVIEW_BACKGROUND,
    ) -> PixelBuffer:
        """
        Render the shadow and source over an opaque background.

        :param source: The source image
        :param background: Background color, its alpha is ignored
        :return: The preview image, canvas sized
        """
        geometry = self.geometry(source)
        shadow = self.shadow_layer(source, geometry, apply_spread_remap=True)
        logger.debug("Rendering %dx%d preview", geometry.width, geometry.height)
        return compose_preview(source, shadow, geometry.source_origin, background)


def bake_shadow(
    source: PixelBuffer,
    parameters: ShadowParameters | None = None,
    spread_in_bake: bool | None = None,
) -> BakeResult:
    """Bake a drop shadow, see :meth:`ShadowBaker.bake`."""
    return ShadowBaker(parameters, spread_in_bake=spread_in_bake).bake(source)


def render_preview(
    source: PixelBuffer,
    parameters: ShadowParameters | None = None,
    background: Sequence[float] = DEFAULT_PREVIEW_BACKGROUND,
) -> PixelBuffer:
    """Render a drop shadow preview, see :meth:`ShadowBaker.preview`."""
    return ShadowBaker(parameters).preview(source, background)
