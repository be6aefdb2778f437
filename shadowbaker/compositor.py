"""
Alpha compositing and preview rendering.

All compositing uses the unpremultiplied Porter-Duff "over" operator:

    out_a   = src_a + dst_a * (1 - src_a)
    out_rgb = (src_rgb * src_a + dst_rgb * dst_a * (1 - src_a)) / out_a

"over" is order dependent. A preview is built bottom to top: opaque
background, then the shadow layer, then the source image.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .exceptions import InvalidBufferError
from .pixel_buffer import PixelBuffer
from .projector import ALPHA_EPSILON


def _over(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Composite src over dst, both (..., 4). Pixels with src alpha <= 0 keep dst."""
    src_a = src[..., 3:4]
    dst_a = dst[..., 3:4]
    dst_weight = dst_a * (1.0 - src_a)
    out_a = src_a + dst_weight

    transparent = out_a < ALPHA_EPSILON
    safe = np.where(transparent, 1.0, out_a)
    rgb = (src[..., :3] * src_a + dst[..., :3] * dst_weight) / safe
    rgb = np.where(transparent, src[..., :3], rgb)

    result = np.concatenate([rgb, out_a], axis=-1).astype(np.float32)
    untouched = src[..., 3] <= 0.0
    result[untouched] = dst[untouched]
    return result


def composite_over(src: PixelBuffer, dst: PixelBuffer) -> PixelBuffer:
    """
    Composite ``src`` over ``dst`` pixel by pixel.

    :param src: Upper layer
    :param dst: Lower layer, same size as ``src``
    :return: New composited buffer
    """
    if src.size != dst.size:
        raise InvalidBufferError(
            f"Layer sizes differ: {src.width}x{src.height} over {dst.width}x{dst.height}"
        )
    return PixelBuffer(_over(src.pixels, dst.pixels))


def composite_at(
    dst: PixelBuffer, src: PixelBuffer, origin: tuple[int, int]
) -> PixelBuffer:
    """
    Composite ``src`` over ``dst`` with its top-left corner at ``origin``.

    Parts of ``src`` outside ``dst`` are clipped.

    :param dst: Lower layer, left unmodified
    :param src: Upper layer, any size
    :param origin: Position (x, y) of ``src`` inside ``dst``
    :return: New buffer of ``dst``'s size
    """
    result = dst.copy()
    ox, oy = origin
    x0 = max(0, -ox)
    y0 = max(0, -oy)
    x1 = min(src.width, dst.width - ox)
    y1 = min(src.height, dst.height - oy)
    if x0 >= x1 or y0 >= y1:
        return result

    region = result.pixels[oy + y0:oy + y1, ox + x0:ox + x1]
    region[...] = _over(src.pixels[y0:y1, x0:x1], region)
    return result


def fill_background(width: int, height: int, color: Sequence[float]) -> PixelBuffer:
    """Opaque background layer. The alpha of ``color`` is ignored."""
    return PixelBuffer.filled(width, height, (color[0], color[1], color[2], 1.0))


def compose_preview(
    source: PixelBuffer,
    shadow: PixelBuffer,
    source_origin: tuple[int, int],
    background: Sequence[float],
) -> PixelBuffer:
    """
    Stack background, shadow and source into a displayable preview.

    :param source: The source image
    :param shadow: Finished shadow layer, defines the canvas size
    :param source_origin: Position of the source inside the canvas
    :param background: Background color, rendered opaque
    :return: The preview image
    """
    canvas = fill_background(shadow.width, shadow.height, background)
    canvas = composite_over(shadow, canvas)
    return composite_at(canvas, source, source_origin)
