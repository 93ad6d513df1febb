"""
Domain service: lay a vegetation-index series out over a field as a cell grid.

The field's bounding box is split into rows x cols equal cells. A cell is
kept when its center lies inside the boundary ring; kept cells take their
value from the series by row-major position, reusing the series cyclically,
and are classified into a health band.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Sequence
import logging

import numpy as np

from app.config import settings
from app.domain.exceptions import InvalidGeometry
from app.domain.models import HEALTH_BAND_THRESHOLDS, Boundary, HealthBand, Point
from app.utils.geometry import bounding_box, points_in_polygon

logger = logging.getLogger(__name__)


@dataclass
class RasterConfig:
    """Configuration for grid rasterization."""

    rows: int = 15
    """Default number of rows over the bounding box"""

    cols: int = 15
    """Default number of columns over the bounding box"""

    empty_series_value: float = 0.0
    """Value given to every inside cell when the series is empty"""


@dataclass(frozen=True)
class GridCell:
    """A grid cell whose center lies inside the boundary."""
    row: int
    col: int
    south: float
    west: float
    north: float
    east: float
    value: float
    band: HealthBand

    @property
    def center(self) -> Point:
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)


@dataclass
class GridSummary:
    """Aggregate view of a rasterized grid."""
    cell_count: int
    mean_value: Optional[float]
    band_counts: dict[HealthBand, int] = field(default_factory=dict)


def classify_health(value: float) -> HealthBand:
    """
    Map an index value to its health band.

    < 0.3 poor, [0.3, 0.4) low, [0.4, 0.7) fair, >= 0.7 excellent.
    """
    for lower_bound, band in HEALTH_BAND_THRESHOLDS:
        if value >= lower_bound:
            return band
    return HealthBand.POOR


def summarize_cells(cells: Sequence[GridCell]) -> GridSummary:
    """Count cells per band and average their values."""
    if not cells:
        return GridSummary(cell_count=0, mean_value=None, band_counts={band: 0 for band in HealthBand})

    counts = Counter(cell.band for cell in cells)
    return GridSummary(
        cell_count=len(cells),
        mean_value=float(np.mean([cell.value for cell in cells])),
        band_counts={band: counts.get(band, 0) for band in HealthBand},
    )


class GridRasterizer:
    """
    Rasterizes an index series onto a field boundary.

    Pure: the same boundary, series, rows and cols always produce the same
    cells in the same (row-major) order.
    """

    def __init__(self, config: Optional[RasterConfig] = None):
        if config:
            self.config = config
        else:
            self.config = RasterConfig(
                rows=settings.grid_rows,
                cols=settings.grid_cols,
                empty_series_value=settings.grid_empty_series_value,
            )

    def rasterize(
        self,
        boundary: Boundary,
        series: Sequence[float],
        rows: Optional[int] = None,
        cols: Optional[int] = None,
    ) -> list[GridCell]:
        """
        Build the inside cells of a rows x cols grid over the boundary.

        Args:
            boundary: Validated field boundary
            series: Ordered index values, consumed positionally
            rows: Grid rows (defaults to config)
            cols: Grid columns (defaults to config)

        Returns:
            Inside cells in row-major order; may be empty

        Raises:
            InvalidGeometry: If the bounding box is degenerate on either axis
            ValueError: If rows or cols is less than 1
        """
        rows = self.config.rows if rows is None else rows
        cols = self.config.cols if cols is None else cols
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")

        ring = boundary.ring
        min_lat, max_lat, min_lng, max_lng = bounding_box(ring)
        if min_lat == max_lat or min_lng == max_lng:
            raise InvalidGeometry("Boundary has a degenerate bounding box")

        lat_step = (max_lat - min_lat) / rows
        lng_step = (max_lng - min_lng) / cols

        # Cell edges and centers, indexed [i, j] like the grid
        i_idx, j_idx = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
        south = min_lat + i_idx * lat_step
        north = min_lat + (i_idx + 1) * lat_step
        west = min_lng + j_idx * lng_step
        east = min_lng + (j_idx + 1) * lng_step
        centers = np.column_stack([((south + north) / 2).ravel(), ((west + east) / 2).ravel()])

        inside = points_in_polygon(centers, ring)

        if len(series) == 0:
            logger.debug(f"Empty series, using default value {self.config.empty_series_value}")

        cells = []
        for flat_index in np.flatnonzero(inside):
            i, j = divmod(int(flat_index), cols)
            value = self._value_for(i * cols + j, series)
            cells.append(GridCell(
                row=i,
                col=j,
                south=float(south[i, j]),
                west=float(west[i, j]),
                north=float(north[i, j]),
                east=float(east[i, j]),
                value=value,
                band=classify_health(value),
            ))

        logger.info(f"Rasterized {rows}x{cols} grid: {len(cells)} cells inside boundary")
        return cells

    def _value_for(self, position: int, series: Sequence[float]) -> float:
        if len(series) == 0:
            return float(self.config.empty_series_value)
        return float(series[position % len(series)])
