"""Spread: post-blur alpha remapping that hardens a soft shadow."""

from __future__ import annotations

import numpy as np

from .pixel_buffer import PixelBuffer

# Exponent at spread 0 (no change) and at spread 1 (strong mid-alpha boost)
MIN_SPREAD_EXPONENT = 1.0
MAX_SPREAD_EXPONENT = 0.2


def spread_exponent(spread: float) -> float:
    """Alpha exponent for a spread amount, spread clamped to 0.0-1.0."""
    t = min(max(spread, 0.0), 1.0)
    return MIN_SPREAD_EXPONENT + (MAX_SPREAD_EXPONENT - MIN_SPREAD_EXPONENT) * t


def apply_spread(buffer: PixelBuffer, spread: float) -> PixelBuffer:
    """
    Raise every non-zero alpha to ``spread_exponent(spread)``.

    Low alphas are lifted toward opaque, which makes the blurred edge of a
    shadow appear harder and wider. Color channels are untouched.

    :param buffer: The shadow layer, left unmodified
    :param spread: Spread amount 0.0-1.0. 0 or less returns the input.
    :return: The remapped buffer
    """
    if spread <= 0.0:
        return buffer

    exponent = spread_exponent(spread)
    result = buffer.copy()
    alpha = result.alpha
    covered = alpha > 0.0
    alpha[covered] = np.power(alpha[covered], exponent)
    return result
