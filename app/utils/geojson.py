"""
Conversion between GeoJSON polygons ([lng, lat]) and internal rings ((lat, lng)).

Every ingress/egress of boundary geometry goes through these two functions;
nothing else in the code base swaps coordinate order.
"""
from typing import Any, Mapping, Sequence, Union

from app.domain.exceptions import InvalidGeometry
from app.domain.models import GeoJSONPolygon, Point, Ring


def ring_from_geojson(polygon: Union[GeoJSONPolygon, Mapping[str, Any]]) -> Ring:
    """
    Extract the outer ring of a GeoJSON polygon as (lat, lng) points.

    The closing position, if present, is kept so the conversion is lossless.

    Args:
        polygon: GeoJSONPolygon or a plain GeoJSON geometry dict

    Returns:
        List of (latitude, longitude) tuples

    Raises:
        InvalidGeometry: If the geometry is not a single-ring polygon
    """
    if isinstance(polygon, GeoJSONPolygon):
        geometry_type = polygon.type
        rings = polygon.coordinates
    else:
        geometry_type = polygon.get("type")
        rings = polygon.get("coordinates")

    if geometry_type != "Polygon":
        raise InvalidGeometry(f"Expected a Polygon geometry, got {geometry_type!r}")
    if not rings:
        raise InvalidGeometry("Polygon has no rings")
    if len(rings) > 1:
        raise InvalidGeometry("Polygons with holes are not supported")

    ring = []
    for position in rings[0]:
        if len(position) < 2:
            raise InvalidGeometry(f"Invalid position {position!r}")
        lng, lat = position[0], position[1]
        ring.append((lat, lng))
    return ring


def ring_to_geojson(ring: Sequence[Point]) -> dict:
    """
    Wrap a (lat, lng) ring as a GeoJSON polygon geometry.

    Args:
        ring: Sequence of (latitude, longitude) points

    Returns:
        {"type": "Polygon", "coordinates": [[[lng, lat], ...]]}
    """
    return {
        "type": "Polygon",
        "coordinates": [[[lng, lat] for lat, lng in ring]],
    }
