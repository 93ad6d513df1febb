"""
Domain service: cumulative great-circle length of a drawn path.
"""
import logging
from dataclasses import dataclass
from typing import Sequence

from app.domain.models import Point
from app.utils.geometry import path_segment_lengths

logger = logging.getLogger(__name__)


def measure(points: Sequence[Point]) -> float:
    """
    Sum the haversine length of every leg of a path.

    Args:
        points: Ordered (lat, lng) points of the drawn path

    Returns:
        Total distance in meters, 0.0 for fewer than 2 points
    """
    if len(points) < 2:
        return 0.0
    return float(path_segment_lengths(points).sum())


@dataclass(frozen=True)
class Measurement:
    """One measurement interaction: the drawn path and its length."""
    points: tuple[Point, ...]
    total_meters: float

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "Measurement":
        path = tuple((float(lat), float(lng)) for lat, lng in points)
        total = measure(path)
        logger.debug(f"Measured {len(path)} points: {total:.1f}m")
        return cls(points=path, total_meters=total)

    @property
    def kilometers(self) -> float:
        return self.total_meters / 1000.0

    @property
    def label(self) -> str:
        return f"{self.kilometers:.2f} km"
