"""
Domain service: turn a freehand-drawn ring into a validated field boundary.
"""
import logging
from typing import Optional, Sequence

from shapely.geometry import Polygon

from app.domain.exceptions import InvalidGeometry
from app.domain.models import Boundary, Point
from app.utils.geo_projection import ring_area_hectares
from app.utils.geometry import is_closed, ring_vertices

logger = logging.getLogger(__name__)

MIN_DISTINCT_VERTICES = 3


def validate_boundary(ring: Sequence[Point]) -> Boundary:
    """
    Validate a drawn ring and wrap it as a Boundary.

    Open rings and closed rings (last point repeating the first, as GeoJSON
    stores them) are both accepted. The repeated closing point is not a
    vertex and is left out of the vertex counts and the area. The ring is
    kept exactly as drawn: no reordering, no deduplication, and a closing
    point is neither added nor removed.
    Self-intersection is not rejected; it is only logged.

    Args:
        ring: Sequence of (lat, lng) points

    Returns:
        Boundary wrapping the ring

    Raises:
        InvalidGeometry: Fewer than 3 vertices or distinct vertices, or a
            zero-length edge between two consecutive points
    """
    points = [(float(lat), float(lng)) for lat, lng in ring]
    vertices = ring_vertices(points)

    if len(vertices) < MIN_DISTINCT_VERTICES:
        raise InvalidGeometry(
            f"A boundary needs at least {MIN_DISTINCT_VERTICES} vertices, got {len(vertices)}"
        )

    for index in range(1, len(points)):
        if points[index] == points[index - 1]:
            raise InvalidGeometry(
                f"Zero-length edge: points {index - 1} and {index} are identical {points[index]}"
            )

    distinct = len(set(vertices))
    if distinct < MIN_DISTINCT_VERTICES:
        raise InvalidGeometry(
            f"A boundary needs at least {MIN_DISTINCT_VERTICES} distinct vertices, got {distinct}"
        )

    polygon = Polygon([(lng, lat) for lat, lng in vertices])
    if not polygon.is_valid:
        logger.warning("Boundary ring is not a simple polygon (self-intersecting or degenerate)")

    area = ring_area_hectares(vertices) if polygon.area > 0 else 0.0
    logger.debug(
        f"Validated {'closed' if is_closed(points) else 'open'} boundary with "
        f"{len(vertices)} vertices, {area:.2f} ha"
    )
    return Boundary(ring=tuple(points), area_hectares=area)


class BoundaryCapture:
    """
    Holds the single in-progress boundary of a field creation/edit session.

    Drawing again replaces the previous candidate entirely (last write wins).
    """

    def __init__(self):
        self._candidate: Optional[Boundary] = None

    @property
    def candidate(self) -> Optional[Boundary]:
        return self._candidate

    def draw(self, ring: Sequence[Point]) -> Boundary:
        """
        Validate a newly drawn ring and make it the current candidate.

        On failure the previous candidate is discarded as well, since the
        user started a new drawing.
        """
        self._candidate = None
        self._candidate = validate_boundary(ring)
        return self._candidate

    def discard(self) -> None:
        self._candidate = None

    def confirm(self) -> Boundary:
        """
        Return the candidate for persisting.

        Raises:
            InvalidGeometry: If nothing has been drawn
        """
        if self._candidate is None:
            raise InvalidGeometry("No boundary has been drawn")
        return self._candidate
