"""
Implements the class :class:`.PixelBuffer`, the RGBA float image every stage of
the shadow pipeline reads and writes.

Pixels are stored as a numpy array of shape (height, width, 4) with float32
channels normalized to 0.0-1.0 and unpremultiplied alpha. Row 0 is the top
row of the image, so a flat row-major index is ``y * width + x``.
"""

from __future__ import annotations

import hashlib
import io
from typing import Iterable, Sequence

import numpy as np
import PIL.Image

from .exceptions import InvalidBufferError

RGBA = tuple[float, float, float, float]
"An unpremultiplied RGBA color with channels in 0.0-1.0"

TRANSPARENT: RGBA = (0.0, 0.0, 0.0, 0.0)


class PixelBuffer:
    """
    A rectangular grid of RGBA colors.

    The buffer owns its numpy array. Stages of the pipeline never modify their
    input buffer in place; they allocate and return a new one.
    """

    def __init__(self, pixels: np.ndarray):
        """
        :param pixels: Float array of shape (height, width, 4). Referenced
            directly, not copied.

        Raises an InvalidBufferError if the array has the wrong shape.
        """
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidBufferError(
                f"Expected array of shape (height, width, 4), got {pixels.shape}"
            )
        if pixels.dtype != np.float32:
            pixels = pixels.astype(np.float32)
        self.pixels: np.ndarray = pixels
        "The pixel data, shape (height, width, 4), float32"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def transparent(cls, width: int, height: int) -> PixelBuffer:
        """Creates a fully transparent buffer."""
        return cls.filled(width, height, TRANSPARENT)

    @classmethod
    def filled(cls, width: int, height: int, color: Sequence[float]) -> PixelBuffer:
        """
        Creates a buffer with every pixel set to ``color``.

        :param width: Width in pixels
        :param height: Height in pixels
        :param color: RGBA color, channels 0.0-1.0
        """
        if width < 0 or height < 0:
            raise InvalidBufferError(f"Invalid buffer size {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.float32)
        pixels[:, :] = np.asarray(color, dtype=np.float32)
        return cls(pixels)

    @classmethod
    def from_flat(
        cls, width: int, height: int, colors: Iterable[Sequence[float]]
    ) -> PixelBuffer:
        """
        Creates a buffer from a flat, row-major sequence of RGBA colors.

        Raises an InvalidBufferError if the sequence does not hold exactly
        ``width * height`` colors.
        """
        data = np.asarray(list(colors), dtype=np.float32)
        if data.size == 0:
            data = data.reshape(0, 4)
        if data.ndim != 2 or data.shape[1] != 4:
            raise InvalidBufferError("Expected a sequence of RGBA colors")
        if data.shape[0] != width * height:
            raise InvalidBufferError(
                f"Expected {width * height} pixels for {width}x{height}, "
                f"got {data.shape[0]}"
            )
        return cls(data.reshape(height, width, 4))

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """
        Creates a buffer from a numpy image.

        uint8 data is scaled to 0.0-1.0, float data is taken as is. RGB input
        receives an opaque alpha channel, grayscale input is expanded to RGB.
        The array is copied.
        """
        if array.ndim == 2:
            array = np.stack([array, array, array], axis=2)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidBufferError(f"Unsupported image shape {array.shape}")

        if array.dtype == np.uint8:
            data = array.astype(np.float32) / 255.0
        elif array.dtype in (np.float32, np.float64):
            data = array.astype(np.float32)
        else:
            raise InvalidBufferError(f"Unsupported dtype: {array.dtype}")

        if data.shape[2] == 3:
            alpha = np.ones((*data.shape[:2], 1), dtype=np.float32)
            data = np.concatenate([data, alpha], axis=2)
        return cls(np.ascontiguousarray(data))

    @classmethod
    def from_pil(cls, image: PIL.Image.Image) -> PixelBuffer:
        """Creates a buffer from a PIL image of any mode."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls.from_array(np.asarray(image))

    # ------------------------------------------------------------------
    # Dimensions and pixel access
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """The buffer's size as (width, height)."""
        return self.width, self.height

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel, shape (height, width)."""
        return self.pixels[:, :, 3]

    @property
    def flat(self) -> np.ndarray:
        """Row-major view of shape (width * height, 4)."""
        return self.pixels.reshape(-1, 4)

    def __len__(self) -> int:
        return self.width * self.height

    def get_pixel(self, x: int, y: int) -> RGBA:
        r, g, b, a = self.pixels[y, x]
        return float(r), float(g), float(b), float(a)

    def set_pixel(self, x: int, y: int, color: Sequence[float]) -> None:
        self.pixels[y, x] = color

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.pixels.copy())

    def is_empty(self) -> bool:
        """True if the buffer has no pixels."""
        return self.width == 0 or self.height == 0

    def allclose(self, other: PixelBuffer, atol: float = 1e-6) -> bool:
        """Compares two buffers of identical size within a tolerance."""
        return self.size == other.size and bool(
            np.allclose(self.pixels, other.pixels, atol=atol)
        )

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Returns a float32 copy of the pixel data."""
        return self.pixels.copy()

    def to_uint8(self) -> np.ndarray:
        """Returns the pixel data as uint8 RGBA, rounded and clipped."""
        return (np.clip(self.pixels, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)

    def to_pil(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.to_uint8())

    def encode_png(self) -> bytes:
        """Encodes the buffer as a lossless PNG."""
        output = io.BytesIO()
        self.to_pil().save(output, format="PNG")
        return output.getvalue()

    def fingerprint(self) -> str:
        """
        Hash of dimensions and pixel data, identifying the image content.

        :return: Hex digest
        """
        digest = hashlib.sha1()
        digest.update(f"{self.width}x{self.height}".encode("ascii"))
        digest.update(np.ascontiguousarray(self.pixels).tobytes())
        return digest.hexdigest()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
