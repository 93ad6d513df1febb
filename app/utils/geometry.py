"""
Geometry primitives over (latitude, longitude) points.

Provides utilities for:
- Bounding box extraction and ring closure
- Ray-casting point-in-polygon tests (scalar and vectorized)
- Haversine great-circle distance

Points exactly on a polygon edge follow a half-open convention: an edge
counts only when one endpoint is strictly north of the test latitude and the
crossing lies strictly east of the test point. For an axis-aligned rectangle
this puts the south and west edges inside and the north and east edges
outside, the same rule pixel rasterizers use so adjacent cells never both
claim a shared edge.
"""
import logging
import math
from typing import Sequence

import numpy as np

from app.domain.exceptions import InvalidGeometry
from app.domain.models import Point

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
RAY_CAST_EPSILON = 1e-12


def bounding_box(ring: Sequence[Point]) -> tuple[float, float, float, float]:
    """
    Compute the bounding box of a ring.

    Args:
        ring: Sequence of (lat, lng) points

    Returns:
        (min_lat, max_lat, min_lng, max_lng)

    Raises:
        InvalidGeometry: If the ring has fewer than 3 points
    """
    if len(ring) < 3:
        raise InvalidGeometry(f"A ring needs at least 3 points, got {len(ring)}")

    points = np.asarray(ring, dtype=float)
    return (
        float(points[:, 0].min()),
        float(points[:, 0].max()),
        float(points[:, 1].min()),
        float(points[:, 1].max()),
    )


def is_closed(ring: Sequence[Point]) -> bool:
    """
    Whether the ring repeats its first point at the end, as GeoJSON rings do.

    Rings are implicitly closed either way; this only tells the two storage
    forms apart. A single point is not a closed ring.
    """
    return len(ring) > 1 and tuple(ring[0]) == tuple(ring[-1])


def ring_vertices(ring: Sequence[Point]) -> list[Point]:
    """The ring's vertices without the repeated closing point, if any."""
    points = list(ring)
    return points[:-1] if is_closed(points) else points


def points_in_polygon(
    points: Sequence[Point] | np.ndarray,
    ring: Sequence[Point]
) -> np.ndarray:
    """
    Ray-casting containment test for many points at once.

    A horizontal ray is cast from every point toward +inf longitude and
    the edge crossings are counted; odd means inside.

    Args:
        points: (lat, lng) points, or an (N, 2) array
        ring: Polygon ring of (lat, lng) points, closed or not

    Returns:
        Boolean array of length N
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    lat = pts[:, 0]
    lng = pts[:, 1]
    vertices = np.asarray(ring, dtype=float)
    inside = np.zeros(len(pts), dtype=bool)

    n = len(vertices)
    j = n - 1
    # Quotients for non-straddling edges are masked out, so inf/nan there are harmless.
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(n):
            lat_i, lng_i = vertices[i]
            lat_j, lng_j = vertices[j]
            straddles = (lat_i > lat) != (lat_j > lat)
            crossing_lng = (
                (lng_j - lng_i) * (lat - lat_i) / (lat_j - lat_i + RAY_CAST_EPSILON) + lng_i
            )
            inside ^= straddles & (lng < crossing_lng)
            j = i

    return inside


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """
    Check if a point is inside a polygon ring.

    Args:
        point: (lat, lng) tuple
        ring: Polygon ring of (lat, lng) points

    Returns:
        True if point is inside polygon, False otherwise
    """
    return bool(points_in_polygon([point], ring)[0])


def haversine_distance(p1: Point, p2: Point) -> float:
    """
    Great-circle distance between two points on a sphere of radius 6,371 km.

    Args:
        p1: First (lat, lng) point
        p2: Second (lat, lng) point

    Returns:
        Distance in meters
    """
    lat1, lng1 = math.radians(p1[0]), math.radians(p1[1])
    lat2, lng2 = math.radians(p2[0]), math.radians(p2[1])

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return EARTH_RADIUS_M * c


def path_segment_lengths(points: Sequence[Point]) -> np.ndarray:
    """
    Haversine length of every leg of a path (vectorized).

    Args:
        points: Ordered (lat, lng) points

    Returns:
        Array of len(points) - 1 distances in meters (empty for < 2 points)
    """
    if len(points) < 2:
        return np.zeros(0)

    radians = np.radians(np.asarray(points, dtype=float))
    lat = radians[:, 0]
    lng = radians[:, 1]

    dlat = np.diff(lat)
    dlng = np.diff(lng)
    a = np.sin(dlat / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlng / 2) ** 2
    return EARTH_RADIUS_M * 2 * np.arcsin(np.sqrt(np.minimum(1.0, a)))
