"""
Geometry helpers for the canvas document.

Pure functions and value types for contain-fit placement and
axis-aligned hit-testing. Everything here is in canvas (surface pixel)
coordinates and has no Qt dependency.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


class InvalidDimension(ValueError):
    """Raised when a width or height that must be positive is zero or negative."""


@dataclass(frozen=True)
class Point:
    """Canvas-space coordinate."""
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)

    def contains(self, point: Point) -> bool:
        return rect_contains(self, point)


def compute_contain_fit(
    viewport_width: float,
    viewport_height: float,
    image_width: float,
    image_height: float
) -> Tuple[float, float, float]:
    """
    Fit an image inside a viewport, preserving aspect ratio and centering it.

    Args:
        viewport_width: Viewport width in pixels
        viewport_height: Viewport height in pixels
        image_width: Natural image width in pixels
        image_height: Natural image height in pixels

    Returns:
        (scale, x, y) where (x, y) is the top-left of the scaled image

    Raises:
        InvalidDimension: If any dimension is zero or negative
    """
    for name, value in (
        ('viewport_width', viewport_width),
        ('viewport_height', viewport_height),
        ('image_width', image_width),
        ('image_height', image_height),
    ):
        if value <= 0:
            raise InvalidDimension(f"{name} must be positive, got {value}")

    scale = min(viewport_width / image_width, viewport_height / image_height)
    x = (viewport_width - image_width * scale) / 2
    y = (viewport_height - image_height * scale) / 2
    return scale, x, y


def rect_contains(rect: Optional[Rect], point: Point) -> bool:
    """
    Inclusive bounds test.

    Args:
        rect: Rectangle to test against (None never contains anything)
        point: Point to test

    Returns:
        True if x0 <= px <= x0 + w and y0 <= py <= y0 + h
    """
    if rect is None:
        return False
    return (
        rect.x <= point.x <= rect.x + rect.width
        and rect.y <= point.y <= rect.y + rect.height
    )


__all__ = ['InvalidDimension', 'Point', 'Rect', 'compute_contain_fit', 'rect_contains']
