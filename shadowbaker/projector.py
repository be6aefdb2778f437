"""
Shadow projection.

Projects the alpha channel of a source image onto the shadow canvas at the
shadow origin, tinted with the shadow color.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .exceptions import InvalidBufferError
from .geometry import CanvasGeometry
from .parameters import parse_color
from .pixel_buffer import PixelBuffer

# Alpha below which a blend is treated as fully transparent
ALPHA_EPSILON = 1e-4


def blend_max_alpha(
    existing: np.ndarray, color: Sequence[float], alpha: np.ndarray
) -> np.ndarray:
    """
    Write a flat color of varying alpha onto existing pixels, max-alpha wins.

    The output alpha is the maximum of both alphas. The output color moves from
    the existing color toward ``color`` in proportion to ``alpha / out_alpha``.
    This approximates "most opaque wins" for overlapping writes and is not
    true alpha compositing: the result is idempotent for repeated writes but
    depends on write order when colors differ.

    :param existing: Existing pixels, shape (..., 4)
    :param color: RGB(A) color to write, alpha ignored
    :param alpha: Alpha of the written color, shape (...)
    :return: New pixels, shape (..., 4)
    """
    out_alpha = np.maximum(existing[..., 3], alpha)
    safe = np.where(out_alpha < ALPHA_EPSILON, 1.0, out_alpha)
    factor = np.where(out_alpha < ALPHA_EPSILON, 0.0, alpha / safe)[..., np.newaxis]

    rgb = np.asarray(color[:3], dtype=np.float32)
    result = np.empty_like(existing)
    result[..., :3] = existing[..., :3] + (rgb - existing[..., :3]) * factor
    result[..., 3] = out_alpha
    return result


def project_shadow(
    source: PixelBuffer,
    geometry: CanvasGeometry,
    shadow_color: Sequence[float],
    opacity: float,
    into: PixelBuffer | None = None,
) -> PixelBuffer:
    """
    Rasterize the shadow layer of a source image.

    Every source pixel with alpha > 0 is written at its position plus the
    shadow origin with alpha ``a * opacity * shadow_color.a``. Pixels falling
    outside the canvas are skipped.

    :param source: The source image
    :param geometry: Canvas geometry from :func:`compute_canvas_geometry`
    :param shadow_color: RGBA shadow color in any form :func:`parse_color` accepts
    :param opacity: Shadow opacity, 0.0-1.0
    :param into: Optional canvas-sized buffer to project into. It is modified
        in place and returned. A transparent buffer is allocated if omitted.
    :return: The shadow layer
    """
    if into is None:
        layer = PixelBuffer.transparent(geometry.width, geometry.height)
    else:
        if into.size != (geometry.width, geometry.height):
            raise InvalidBufferError(
                f"Target buffer is {into.width}x{into.height}, "
                f"canvas is {geometry.width}x{geometry.height}"
            )
        layer = into

    shadow_color = parse_color(shadow_color)
    ox, oy = geometry.shadow_origin

    # Clip the source rectangle to the canvas
    x0 = max(0, -ox)
    y0 = max(0, -oy)
    x1 = min(source.width, geometry.width - ox)
    y1 = min(source.height, geometry.height - oy)
    if x0 >= x1 or y0 >= y1:
        return layer

    src_alpha = source.alpha[y0:y1, x0:x1]
    target = layer.pixels[oy + y0:oy + y1, ox + x0:ox + x1]

    covered = src_alpha > 0.0
    final_alpha = src_alpha * np.float32(opacity * shadow_color[3])
    blended = blend_max_alpha(target, shadow_color, final_alpha)
    target[covered] = blended[covered]
    return layer
