"""
Domain models for fields, boundaries and monitoring windows.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).

All internal geometry uses (latitude, longitude) ordering. GeoJSON
([longitude, latitude]) only appears in GeoJSONPolygon and is converted
by app.utils.geojson.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field, field_validator

from app.utils.dates import to_calendar_date


Point = Tuple[float, float]
"""(latitude, longitude) in decimal degrees."""

Ring = List[Point]


class CropType(str, Enum):
    """Crop categories a field can be monitored for."""
    SUGARCANE = "sugarcane"
    WHEAT = "wheat"
    RICE = "rice"
    MAIZE = "maize"
    COTTON = "cotton"


class HealthBand(str, Enum):
    """Discrete vegetation-health categories."""
    POOR = "poor"
    LOW = "low"
    FAIR = "fair"
    EXCELLENT = "excellent"

    @property
    def color(self) -> str:
        """Legend color used by map renderers."""
        return _BAND_COLORS[self]


_BAND_COLORS = {
    HealthBand.POOR: "red",
    HealthBand.LOW: "orange",
    HealthBand.FAIR: "yellow",
    HealthBand.EXCELLENT: "green",
}

# Lower bound (inclusive) of each band, checked from the top down.
HEALTH_BAND_THRESHOLDS: Tuple[Tuple[float, HealthBand], ...] = (
    (0.7, HealthBand.EXCELLENT),
    (0.4, HealthBand.FAIR),
    (0.3, HealthBand.LOW),
)


class GeoJSONPolygon(BaseModel):
    """Polygon geometry in GeoJSON order (longitude first)."""
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]] = Field(
        description="Linear rings of [longitude, latitude] positions; only the outer ring is supported"
    )


class Boundary(BaseModel):
    """Validated outer ring of a field, in (lat, lng) order exactly as drawn."""
    ring: Tuple[Point, ...]
    area_hectares: Optional[float] = Field(
        default=None,
        description="Planar area of the ring after UTM projection"
    )

    class Config:
        frozen = True


class Slot(BaseModel):
    """Fixed 14-day inclusive monitoring window."""
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")

    class Config:
        populate_by_name = True
        frozen = True


class FieldRecord(BaseModel):
    """A monitored field as stored by the records backend."""
    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    crop: Optional[CropType] = None
    boundary: GeoJSONPolygon
    from_date: Optional[date] = Field(default=None, alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")

    class Config:
        populate_by_name = True

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _calendar_date(cls, value):
        # Backend stores midnight-UTC timestamps
        if value is None or value == "":
            return None
        return to_calendar_date(value)

    @field_validator("crop", mode="before")
    @classmethod
    def _optional_crop(cls, value):
        # Unset crops arrive as ""
        if value == "":
            return None
        return value


class PredictionResult(BaseModel):
    """Precomputed vegetation-index output attached to a prediction."""
    ndvi: Optional[float] = None
    gndvi: Optional[float] = None
    ndvi_series: List[float] = Field(default_factory=list)
    precipitation_series: List[float] = Field(default_factory=list)
    gdd_series: List[float] = Field(default_factory=list)

    class Config:
        extra = "allow"


class Prediction(BaseModel):
    """Prediction record from the records backend."""
    id: Optional[str] = Field(default=None, alias="_id")
    field: Union[str, Dict[str, Any], None] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    result: PredictionResult = Field(default_factory=PredictionResult)

    class Config:
        populate_by_name = True

    @property
    def field_id(self) -> Optional[str]:
        """Field id whether the backend sent an id string or an embedded field."""
        if isinstance(self.field, dict):
            value = self.field.get("_id")
            return str(value) if value is not None else None
        return str(self.field) if self.field is not None else None


class GeocodeResult(BaseModel):
    """Single location search hit."""
    place_id: Optional[int] = None
    display_name: str
    lat: float
    lon: float
