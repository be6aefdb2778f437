"""
Pytest fixtures for shadowbaker tests
"""

import numpy as np
import pytest

from shadowbaker import PixelBuffer, ShadowParameters


@pytest.fixture
def opaque_square() -> PixelBuffer:
    """
    Returns a fully opaque white 4x4 image.
    :return: The source buffer
    """
    return PixelBuffer.filled(4, 4, (1.0, 1.0, 1.0, 1.0))


@pytest.fixture
def centered_dot() -> PixelBuffer:
    """Create a 32x32 transparent image with an opaque red 4x4 square in the center."""
    data = np.zeros((32, 32, 4), dtype=np.float32)
    data[14:18, 14:18] = [1.0, 0.0, 0.0, 1.0]
    return PixelBuffer(data)


@pytest.fixture
def soft_sprite() -> PixelBuffer:
    """Create a 10x8 sprite with a horizontal alpha gradient and a transparent border."""
    data = np.zeros((8, 10, 4), dtype=np.float32)
    data[1:7, 1:9, :3] = [0.2, 0.6, 0.9]
    data[1:7, 1:9, 3] = np.linspace(0.25, 1.0, 8, dtype=np.float32)
    return PixelBuffer(data)


@pytest.fixture
def hard_parameters() -> ShadowParameters:
    """Black shadow without offset, blur or spread."""
    return ShadowParameters(
        shadow_color=(0.0, 0.0, 0.0, 1.0),
        opacity=1.0,
        angle=135.0,
        distance=0.0,
        spread=0.0,
        blur_radius=0,
        padding=1,
    )
