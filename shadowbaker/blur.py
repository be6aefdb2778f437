# shadowbaker - Separable Gaussian Blur
"""
Separable Gaussian blur with edge-clamped sampling.

The blur runs as two 1D passes, horizontal then vertical, each costing
O(radius) per pixel. Channels are blurred independently on unpremultiplied
values, so color and alpha are weighted by the same kernel.
"""

from __future__ import annotations

import numpy as np

from .pixel_buffer import PixelBuffer


def gaussian_kernel(radius: int) -> np.ndarray:
    """
    Normalized 1D Gaussian kernel for a blur radius.

    :param radius: Blur radius in pixels, sigma is ``radius / 2``
    :return: Weights for offsets ``-radius..radius``, shape (2 * radius + 1,),
        summing to 1
    """
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if radius == 0:
        return np.ones(1, dtype=np.float64)
    sigma = radius / 2.0
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def _blur_axis(pixels: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """
    One blur pass along an axis of a (height, width, 4) array.

    Samples beyond the border repeat the edge pixel. Reads only from
    ``pixels`` and writes a new array.
    """
    radius = len(kernel) // 2
    length = pixels.shape[axis]
    positions = np.arange(length)
    result = np.zeros(pixels.shape, dtype=np.float64)
    for k in range(-radius, radius + 1):
        indices = np.clip(positions + k, 0, length - 1)
        result += kernel[k + radius] * np.take(pixels, indices, axis=axis)
    return result


def gaussian_blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    """
    Blur a buffer with a separable Gaussian kernel.

    :param buffer: The buffer to blur, left unmodified
    :param radius: Blur radius in pixels. 0 returns the input unchanged.
    :return: The blurred buffer

    Raises a ValueError for negative radii.
    """
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if radius == 0 or buffer.is_empty():
        return buffer

    kernel = gaussian_kernel(radius)
    horizontal = _blur_axis(buffer.pixels, kernel, axis=1)
    vertical = _blur_axis(horizontal, kernel, axis=0)
    return PixelBuffer(vertical.astype(np.float32))
