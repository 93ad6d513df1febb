"""
Geospatial projection utilities for planar measurements of field boundaries.
"""
from typing import List, Sequence, Tuple
from pyproj import Transformer
from shapely.geometry import Polygon

from app.domain.models import Point


def get_utm_zone(longitude: float) -> int:
    """
    Calculate the UTM zone number from longitude.

    Args:
        longitude: Longitude in degrees

    Returns:
        UTM zone number (1-60)
    """
    return min(int((longitude + 180) / 6) + 1, 60)


def get_utm_crs(latitude: float, longitude: float) -> str:
    """
    Get the appropriate UTM CRS (Coordinate Reference System) for a location.

    Args:
        latitude: Latitude in degrees
        longitude: Longitude in degrees

    Returns:
        EPSG code for the UTM zone
    """
    zone = get_utm_zone(longitude)
    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    hemisphere = "6" if latitude >= 0 else "7"
    return f"EPSG:32{hemisphere}{zone:02d}"


def project_to_meters(coordinates: Sequence[Point]) -> List[Tuple[float, float]]:
    """
    Project lat/lng coordinates to the UTM zone of the first point.

    Args:
        coordinates: Sequence of (latitude, longitude) tuples in degrees

    Returns:
        List of (x, y) coordinates in meters
    """
    if not coordinates:
        raise ValueError("Coordinates list cannot be empty")

    lat, lng = coordinates[0]
    transformer = Transformer.from_crs(
        "EPSG:4326",
        get_utm_crs(lat, lng),
        always_xy=True  # (lng, lat) -> (x, y)
    )
    return [transformer.transform(lng, lat) for lat, lng in coordinates]


def ring_area_hectares(ring: Sequence[Point]) -> float:
    """
    Planar area of a (lat, lng) ring after UTM projection.

    Args:
        ring: Polygon ring of (lat, lng) points

    Returns:
        Area in hectares
    """
    projected = project_to_meters(ring)
    return Polygon(projected).area / 10_000.0
