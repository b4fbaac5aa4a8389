"""Handling basic 2D geometries: points, vectors, boxes and viewports"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

from mathviz.common import Number, PointLike


###############################################################################
# Vector2
###############################################################################
@dataclass(frozen=True)
class Vector2:
    """
    Immutable 2D point or vector.

    NaN and infinite coordinates are accepted and propagated unchanged,
    callers use them as "undefined here" markers.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    @classmethod
    def of(cls, point: PointLike) -> Vector2:
        """Create a Vector2 from a Vector2 or any (x, y) sequence."""
        if isinstance(point, Vector2):
            return point
        return cls(float(point[0]), float(point[1]))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: Number) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: Number) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def dot(self, other: Vector2) -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    @property
    def length(self) -> float:
        """float: The Euclidean norm of the vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: Vector2, t: float) -> Vector2:
        """Linear interpolation (1-t)*self + t*other."""
        return Vector2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def is_finite(self) -> bool:
        """True if both coordinates are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    def approx_equal(self, other: Vector2, atol: float = 1e-9) -> bool:
        """Compare two points coordinate-wise with an absolute tolerance."""
        return abs(self.x - other.x) <= atol and abs(self.y - other.y) <= atol

    def to_tuple(self) -> Tuple[float, float]:
        """The point as (x, y) tuple."""
        return (self.x, self.y)


# A point is a vector from the origin
Point2 = Vector2


###############################################################################
# BoundingBox
###############################################################################
@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned extent of a curve, as returned by CubicBezierCurve.bounding_box()."""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        return self.xmin, self.ymin, self.xmax, self.ymax

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def contains(self, point: PointLike, atol: float = 0.0) -> bool:
        """True if the point lies inside the box or on its border, widened by atol."""
        x, y = Vector2.of(point)
        return self.xmin - atol <= x <= self.xmax + atol and self.ymin - atol <= y <= self.ymax + atol


###############################################################################
# Viewport
###############################################################################
@dataclass(frozen=True)
class Viewport:
    """
    Visible graph range in abstract coordinates plus the screen resolution.

    The pixel scale is only used to choose a sampling density, a Viewport never
    converts coordinates to pixels. Coordinates follow the y-up graph
    convention: top is the largest visible y, bottom the smallest.

    Attributes:
        left (float): x-coordinate of the left border.
        top (float): y-coordinate of the top border.
        right (float): x-coordinate of the right border.
        bottom (float): y-coordinate of the bottom border.
        px_per_unit_x (float): Pixels per unit in x-direction.
        px_per_unit_y (float): Pixels per unit in y-direction.
    """

    left: float
    top: float
    right: float
    bottom: float
    px_per_unit_x: float
    px_per_unit_y: float

    def __post_init__(self):
        if not self.px_per_unit_x > 0.0 or not math.isfinite(self.px_per_unit_x):
            raise ValueError(f"px_per_unit_x must be a positive finite number, got {self.px_per_unit_x}.")
        if not self.px_per_unit_y > 0.0 or not math.isfinite(self.px_per_unit_y):
            raise ValueError(f"px_per_unit_y must be a positive finite number, got {self.px_per_unit_y}.")

    @classmethod
    def from_pixel_size(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        left: float,
        top: float,
        right: float,
        bottom: float,
        width_px: float,
        height_px: float,
    ) -> Viewport:
        """
        Create a Viewport for a canvas of the given pixel size.

        Args:
            left, top, right, bottom: Graph range in abstract coordinates
            width_px: Canvas width in pixels
            height_px: Canvas height in pixels

        Returns:
            Viewport: with px_per_unit derived from the canvas size
        """
        return cls(
            left=left,
            top=top,
            right=right,
            bottom=bottom,
            px_per_unit_x=width_px / (right - left),
            px_per_unit_y=height_px / (top - bottom),
        )

    @property
    def width(self) -> float:
        """float: The horizontal span right - left."""
        return self.right - self.left

    @property
    def height(self) -> float:
        """float: The vertical span top - bottom."""
        return self.top - self.bottom
