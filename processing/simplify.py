"""
Geometry simplification utilities.

This module contains the Douglas-Peucker simplification used to reduce the
number of vertices in polling district boundaries before they are written
into KML documents, together with the ring helpers callers need around it.
"""

import math
from typing import Sequence

from shapely.geometry import Polygon

from core.config import DENSITY_MAPPING
from core.types import Point


def point_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to the nearest location on the segment start-end.

    The projection parameter is clamped to [0, 1], so points beyond either end
    are measured against that endpoint rather than the infinite line.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(point[0] - start[0], point[1] - start[1])

    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    proj_x = start[0] + t * dx
    proj_y = start[1] + t * dy
    return math.hypot(point[0] - proj_x, point[1] - proj_y)


def douglas_peucker(points: Sequence[Point], epsilon: float) -> list[Point]:
    """Simplify a path using the Douglas-Peucker algorithm.

    Interior points closer than or exactly at ``epsilon`` to the simplified
    path are dropped. The result is a subsequence of ``points`` that always
    keeps the first and last point. Inputs shorter than three points are
    returned unchanged.

    Args:
        points: Ordered path vertices
        epsilon: Maximum allowed deviation, in coordinate units

    Returns:
        New list with the retained vertices in their original order
    """
    if len(points) < 3:
        return list(points)

    first = points[0]
    last = points[-1]
    max_dist = -1.0
    max_idx = 1
    for i in range(1, len(points) - 1):
        dist = point_segment_distance(points[i], first, last)
        if dist > max_dist:
            max_dist = dist
            max_idx = i

    if max_dist > epsilon:
        left = douglas_peucker(points[:max_idx + 1], epsilon)
        right = douglas_peucker(points[max_idx:], epsilon)
        # left ends and right starts with the split point
        return left[:-1] + right
    return [first, last]


def close_ring(points: Sequence[Point]) -> list[Point]:
    """Return the ring with its first point repeated at the end if needed."""
    ring = list(points)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def simplify_ring(points: Sequence[Point], epsilon: float) -> list[Point]:
    """Simplify a boundary ring and return it closed.

    Falls back to the unsimplified ring when simplification collapses it below
    a triangle or turns a valid polygon into an invalid one.

    Args:
        points: Ring vertices, with or without the closing point
        epsilon: Simplification tolerance in degrees

    Returns:
        Closed ring suitable for a KML LinearRing
    """
    original = close_ring(points)
    simplified = close_ring(douglas_peucker(points, epsilon))

    # A polygon needs at least 3 distinct vertices plus the closing one
    if len(simplified) < 4:
        return original
    if len(original) >= 4 and Polygon(original).is_valid and not Polygon(simplified).is_valid:
        return original
    return simplified


def resolve_tolerance(value) -> float:
    """Turn a density label or a numeric value into a tolerance in degrees.

    Args:
        value: One of the DENSITY_MAPPING keys, a number, or a numeric string

    Returns:
        Non-negative tolerance

    Raises:
        ValueError: If the value is unknown, not a number, or negative
    """
    if isinstance(value, str):
        key = value.strip().lower()
        if key in DENSITY_MAPPING:
            return DENSITY_MAPPING[key]
        try:
            value = float(key)
        except ValueError:
            raise ValueError(
                f"Unknown tolerance {value!r}: expected a number or one of {', '.join(DENSITY_MAPPING)}"
            ) from None

    tolerance = float(value)
    if math.isnan(tolerance) or tolerance < 0:
        raise ValueError(f"Tolerance must be a non-negative number, got {value!r}")
    return tolerance
