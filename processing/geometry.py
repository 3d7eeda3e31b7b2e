"""
Coordinate text handling.

The election office publishes boundaries as ``"lat lon,lat lon,..."`` strings
while KML expects ``"lon,lat,alt lon,lat,alt ..."``. This module converts
between the two, keeping points in longitude-first order in between.
"""

from typing import Iterable

from core.types import Point


def parse_poligon(text: str) -> list[Point]:
    """Parse a ``poligon`` string of ``"lat lon"`` pairs into points.

    Args:
        text: Comma separated pairs, latitude first, separated by whitespace

    Returns:
        Points in (lon, lat) order

    Raises:
        ValueError: If a pair does not contain exactly two numbers
    """
    points = []
    for fragment in text.split(','):
        fragment = fragment.strip()
        if not fragment:
            continue
        parts = fragment.split()
        if len(parts) != 2:
            raise ValueError(f"Malformed coordinate pair: {fragment!r}")
        try:
            lat, lon = float(parts[0]), float(parts[1])
        except ValueError:
            raise ValueError(f"Malformed coordinate pair: {fragment!r}") from None
        points.append(Point(lon, lat))
    return points


def format_coordinates(points: Iterable[Point], precision: int = 6) -> str:
    """Serialize points as KML coordinate tuples with fixed decimals."""
    return ' '.join(f"{lon:.{precision}f},{lat:.{precision}f},0" for lon, lat in points)
