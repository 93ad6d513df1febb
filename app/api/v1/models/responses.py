"""
API response models using Pydantic.
"""
from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from app.api.v1.models.requests import LatLng
from app.domain.models import CropType, GeoJSONPolygon, GeocodeResult, HealthBand
from app.services.domain.grid_rasterizer import GridCell, GridSummary


class BoundaryResponse(BaseModel):
    """A validated boundary."""
    boundary: GeoJSONPolygon
    vertex_count: int = Field(description="Vertices, not counting a repeated closing point")
    closed: bool = Field(description="Whether the ring repeats its first point at the end")
    area_hectares: Optional[float] = Field(description="Planar area after UTM projection")
    bounding_box: List[float] = Field(description="[min_lat, max_lat, min_lng, max_lng]")


class MeasurementResponse(BaseModel):
    """Length of a drawn path."""
    point_count: int
    total_meters: float
    kilometers: float
    label: str = Field(examples=["1.23 km"])


class GridCellResponse(BaseModel):
    """One inside cell of a rasterized grid."""
    row: int
    col: int
    bounds: List[List[float]] = Field(description="[[south, west], [north, east]]")
    center: LatLng
    value: float
    band: HealthBand
    color: str

    @classmethod
    def from_cell(cls, cell: GridCell) -> "GridCellResponse":
        lat, lng = cell.center
        return cls(
            row=cell.row,
            col=cell.col,
            bounds=[[cell.south, cell.west], [cell.north, cell.east]],
            center=LatLng(lat=lat, lng=lng),
            value=cell.value,
            band=cell.band,
            color=cell.band.color,
        )


class GridSummaryResponse(BaseModel):
    """Aggregate of a rasterized grid."""
    cell_count: int
    mean_value: Optional[float]
    band_counts: Dict[HealthBand, int]

    @classmethod
    def from_summary(cls, summary: GridSummary) -> "GridSummaryResponse":
        return cls(
            cell_count=summary.cell_count,
            mean_value=summary.mean_value,
            band_counts=summary.band_counts,
        )


class GridResponse(BaseModel):
    """Sparse cell grid over a boundary."""
    rows: int
    cols: int
    cells: List[GridCellResponse]
    summary: GridSummaryResponse


class SlotResponse(BaseModel):
    """A 14-day monitoring window."""
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    length_days: int = 14

    class Config:
        populate_by_name = True


class SlotValidationResponse(BaseModel):
    """Result of a window check."""
    valid: bool
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")

    class Config:
        populate_by_name = True


class FieldGridResponse(BaseModel):
    """Rasterized latest prediction of a stored field."""
    field_id: str
    name: str
    crop: Optional[CropType]
    from_date: Optional[date] = Field(alias="from")
    to_date: Optional[date] = Field(alias="to")
    current_index: Optional[float] = Field(description="Latest scalar NDVI, null when no data")
    current_band: Optional[HealthBand]
    days_remaining: Optional[int] = Field(description="Days left until the window ends, null without a window")
    grid: GridResponse

    class Config:
        populate_by_name = True


class LocationSearchResponse(BaseModel):
    """Location search hits, best first."""
    query: str
    results: List[GeocodeResult]


class TileLayer(BaseModel):
    url: str
    attribution: str
    label_url: Optional[str] = None


class MapViewResponse(BaseModel):
    """Where the map should be centered."""
    center: LatLng
    zoom: int


class MapDefaultsResponse(MapViewResponse):
    """Initial map view and the available basemaps."""
    default_style: str = "satellite"
    tile_layers: Dict[str, TileLayer]
