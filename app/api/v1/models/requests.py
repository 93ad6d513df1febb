"""
API request models using Pydantic.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from app.domain.models import CropType, GeoJSONPolygon


class LatLng(BaseModel):
    """A geographical point."""
    lat: float = Field(ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(ge=-180, le=180, description="Longitude in degrees")

    def as_point(self) -> tuple[float, float]:
        return (self.lat, self.lng)


class BoundaryRequest(BaseModel):
    """A freshly drawn boundary to validate."""
    boundary: GeoJSONPolygon


class MeasurementRequest(BaseModel):
    """Ordered points of a drawn path."""
    points: List[LatLng] = Field(description="Path vertices in drawing order")


class GridRequest(BaseModel):
    """Boundary and index series to rasterize."""
    boundary: GeoJSONPolygon
    series: List[float] = Field(
        default_factory=list,
        description="Ordered index values; reused cyclically over the cells"
    )
    rows: Optional[int] = Field(default=None, ge=1, le=500)
    cols: Optional[int] = Field(default=None, ge=1, le=500)


class SlotRequest(BaseModel):
    """Anchor date of a monitoring window."""
    from_date: Optional[date] = Field(default=None, alias="from")

    class Config:
        populate_by_name = True


class SlotValidationRequest(BaseModel):
    """A monitoring window to check."""
    from_date: Optional[date] = Field(default=None, alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")

    class Config:
        populate_by_name = True


class FieldCreateRequest(BaseModel):
    """A new field from the capture flow."""
    name: str = Field(min_length=1, max_length=100)
    crop: CropType
    boundary: GeoJSONPolygon
    from_date: Optional[date] = Field(default=None, alias="from")

    class Config:
        populate_by_name = True


class FieldUpdateRequest(BaseModel):
    """Editable attributes of a field; the boundary is immutable."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    crop: Optional[CropType] = None
    from_date: Optional[date] = Field(default=None, alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")

    class Config:
        populate_by_name = True
