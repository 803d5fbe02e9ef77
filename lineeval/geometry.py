"""Bounding boxes and point-in-polygon tests on the integer pixel grid.

This module provides:
1. Rect - Half-open axis-aligned rectangle
2. Polygon - Immutable closed polygon with integer vertices
3. bounding_box(), intersects(), contains() - Scalar primitives
4. contains_points() - Vectorised containment over numpy coordinate arrays

Pixels are addressed by their integer top-left corner. A rectangle
``Rect(x, y, width, height)`` covers the pixels ``x <= px < x + width`` and
``y <= py < y + height``. Polygon containment uses the even-odd rule with the
same half-open convention: a point on a left or top edge is inside, a point on
a right or bottom edge is outside. An axis-aligned square with corners (0, 0)
and (10, 10) therefore contains exactly 100 pixels.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import cached_property

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Half-open axis-aligned rectangle."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_corners(cls, x0: int, y0: int, x1: int, y1: int) -> Rect:
        """Build a rectangle from its min corner and (exclusive) max corner."""
        return cls(x0, y0, x1 - x0, y1 - y0)

    @property
    def x1(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def y1(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """True if the rectangle covers no pixel."""
        return self.width <= 0 or self.height <= 0

    @property
    def area(self) -> int:
        """Number of pixels covered."""
        if self.is_empty:
            return 0
        return self.width * self.height

    def contains(self, px: int, py: int) -> bool:
        """Return True if pixel (px, py) lies in the rectangle."""
        return self.x <= px < self.x1 and self.y <= py < self.y1

    def contains_points(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorised `contains` over coordinate arrays of equal shape."""
        return (xs >= self.x) & (xs < self.x1) & (ys >= self.y) & (ys < self.y1)

    def union(self, other: Rect) -> Rect:
        """Smallest rectangle enclosing both rectangles."""
        return Rect.from_corners(
            min(self.x, other.x),
            min(self.y, other.y),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )

    def intersection(self, other: Rect) -> Rect:
        """Overlap of both rectangles (empty rectangle if they don't overlap)."""
        x0, y0 = max(self.x, other.x), max(self.y, other.y)
        x1, y1 = min(self.x1, other.x1), min(self.y1, other.y1)
        return Rect.from_corners(x0, y0, max(x0, x1), max(y0, y1))

    def grid(self) -> tuple[np.ndarray, np.ndarray]:
        """Pixel coordinates covered by the rectangle as (xs, ys), row-major."""
        ys, xs = np.mgrid[self.y : self.y1, self.x : self.x1]
        return xs, ys


@dataclass(frozen=True)
class Polygon:
    """Closed polygon with integer vertices.

    The closing edge from the last vertex back to the first is implicit.
    """

    points: tuple[tuple[int, int], ...]

    def __post_init__(self):
        object.__setattr__(self, "points", tuple((int(x), int(y)) for x, y in self.points))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[int]]) -> Polygon:
        """Build a polygon from any iterable of (x, y) pairs."""
        return cls(tuple((x, y) for x, y in points))

    @classmethod
    def from_rect(cls, x0: int, y0: int, x1: int, y1: int) -> Polygon:
        """Axis-aligned rectangular polygon with corners (x0, y0) and (x1, y1)."""
        return cls(((x0, y0), (x1, y0), (x1, y1), (x0, y1)))

    def __len__(self) -> int:
        return len(self.points)

    @cached_property
    def bounds(self) -> Rect:
        """Axis-aligned bounding box (see `bounding_box`)."""
        return bounding_box(self)


def bounding_box(polygon: Polygon) -> Rect:
    """Bounding box of the polygon's vertices.

    The box spans from the minimum to the maximum vertex coordinate, so its
    width is ``max_x - min_x``. A polygon without vertices gets an empty box
    at the origin.
    """
    if not polygon.points:
        return Rect(0, 0, 0, 0)
    xs = [x for x, _ in polygon.points]
    ys = [y for _, y in polygon.points]
    return Rect.from_corners(min(xs), min(ys), max(xs), max(ys))


def intersects(a: Rect, b: Rect) -> bool:
    """Half-open overlap test. Empty rectangles never intersect."""
    if a.is_empty or b.is_empty:
        return False
    return a.x < b.x1 and b.x < a.x1 and a.y < b.y1 and b.y < a.y1


def intersection_area(a: Rect, b: Rect) -> int:
    """Number of pixels inside both rectangles."""
    if not intersects(a, b):
        return 0
    return a.intersection(b).area


def contains(polygon: Polygon, x: int, y: int) -> bool:
    """Return True if pixel (x, y) lies inside the polygon (even-odd rule)."""
    return bool(contains_points(polygon, np.asarray(x), np.asarray(y)))


def contains_points(polygon: Polygon, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorised point-in-polygon test.

    Counts the edges crossed by a ray cast from each point towards positive
    x. Edges are half-open in y (lower end included) and a point must lie
    strictly left of an edge for the ray to cross it, which gives the
    half-open insideness described in the module docstring.

    Args:
        polygon: Polygon to test against
        xs: Integer x coordinates
        ys: Integer y coordinates, same shape as xs

    Returns:
        Boolean array of the same shape as xs
    """
    xs = np.asarray(xs)
    ys = np.asarray(ys)
    if len(polygon) < 3:
        return np.zeros(xs.shape, dtype=bool)

    inside_box = polygon.bounds.contains_points(xs, ys)
    hits = np.zeros(xs.shape, dtype=np.int32)

    last_x, last_y = polygon.points[-1]
    for cur_x, cur_y in polygon.points:
        if cur_y == last_y:
            last_x, last_y = cur_x, cur_y
            continue

        if cur_x < last_x:
            left_x = cur_x
            candidate = xs < last_x
        else:
            left_x = last_x
            candidate = xs < cur_x

        if cur_y < last_y:
            candidate &= (ys >= cur_y) & (ys < last_y)
            dx = xs - cur_x
            dy = ys - cur_y
        else:
            candidate &= (ys >= last_y) & (ys < cur_y)
            dx = xs - last_x
            dy = ys - last_y

        edge_x = dy / (last_y - cur_y) * (last_x - cur_x)
        crossing = (xs < left_x) | (dx < edge_x)
        hits += candidate & crossing

        last_x, last_y = cur_x, cur_y

    return inside_box & (hits % 2 == 1)


def union_box(a: Polygon, b: Polygon) -> Rect:
    """Union of the bounding boxes of two polygons."""
    return a.bounds.union(b.bounds)
