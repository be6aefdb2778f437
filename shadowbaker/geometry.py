"""
Canvas geometry for a baked shadow.

The shadow canvas is the smallest rectangle holding both the source image and
its offset shadow, grown on every side by a margin of ``padding + blur_radius``
so the blur has room to fade out.

Coordinates follow the image convention of :class:`~shadowbaker.PixelBuffer`:
origin at the top-left, x to the right, y downward. An angle of 0 degrees
points along +x and increasing angles rotate toward +y, i.e. clockwise on
screen.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanvasGeometry:
    """Size of the shadow canvas and where source and shadow sit inside it."""
    width: int
    height: int
    source_origin: tuple[int, int]  # Top-left of the source image
    shadow_origin: tuple[int, int]  # Top-left of the projected shadow
    offset: tuple[int, int] = (0, 0)  # Shadow offset (dx, dy) in pixels
    margin: int = 0
    pivot: tuple[float, float] = (0.5, 0.5)  # Source center as canvas fraction

    def size_ratio(self, source_width: int, source_height: int) -> tuple[float, float]:
        """
        Scale of the canvas relative to the source image.

        A placed shadow object sized by this factor relative to the source
        object maps its pixels 1:1 onto the source's pixels.
        """
        return (
            self.width / max(1, source_width),
            self.height / max(1, source_height),
        )


def shadow_offset(angle: float, distance: float) -> tuple[int, int]:
    """
    Integer pixel offset of the shadow for a direction and distance.

    Rounds half to even.

    :param angle: Direction in degrees, 0 = +x, 90 = +y (down)
    :param distance: Distance in pixels
    """
    rad = math.radians(angle)
    return round(distance * math.cos(rad)), round(distance * math.sin(rad))


def compute_canvas_geometry(
    width: int,
    height: int,
    angle: float,
    distance: float,
    padding: int = 0,
    blur_radius: int = 0,
) -> CanvasGeometry:
    """
    Compute the canvas holding a source image and its shadow.

    :param width: Source width in pixels
    :param height: Source height in pixels
    :param angle: Shadow direction in degrees
    :param distance: Shadow distance in pixels
    :param padding: Extra space around the content in pixels
    :param blur_radius: Blur radius in pixels, reserved as additional margin
    :return: The canvas geometry

    Raises a ValueError for negative sizes, padding or blur radius.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Invalid source size {width}x{height}")
    if padding < 0:
        raise ValueError(f"padding must be >= 0, got {padding}")
    if blur_radius < 0:
        raise ValueError(f"blur_radius must be >= 0, got {blur_radius}")

    dx, dy = shadow_offset(angle, distance)

    # Bounds containing both the source and the shadow
    min_x = min(0, dx)
    min_y = min(0, dy)
    max_x = max(width, width + dx)
    max_y = max(height, height + dy)

    margin = padding + blur_radius
    canvas_width = (max_x - min_x) + margin * 2
    canvas_height = (max_y - min_y) + margin * 2

    base_x = margin - min_x
    base_y = margin - min_y

    # Keep the source visually centered on the pivot
    pivot = (
        (base_x + width * 0.5) / max(1, canvas_width),
        (base_y + height * 0.5) / max(1, canvas_height),
    )

    geometry = CanvasGeometry(
        width=canvas_width,
        height=canvas_height,
        source_origin=(base_x, base_y),
        shadow_origin=(base_x + dx, base_y + dy),
        offset=(dx, dy),
        margin=margin,
        pivot=pivot,
    )
    logger.debug("Canvas geometry for %dx%d source: %s", width, height, geometry)
    return geometry
