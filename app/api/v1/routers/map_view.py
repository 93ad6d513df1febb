"""
API router for map view defaults.
"""
from fastapi import APIRouter

from app.api.v1.models.requests import LatLng
from app.api.v1.models.responses import MapDefaultsResponse, MapViewResponse, TileLayer
from app.config import settings
from app.infrastructure.api_constants import TileLayers


router = APIRouter(
    prefix="/map",
    tags=["map"],
)


@router.get(
    "/defaults",
    response_model=MapDefaultsResponse,
    summary="Initial map view and basemaps",
)
async def get_map_defaults() -> MapDefaultsResponse:
    return MapDefaultsResponse(
        center=LatLng(lat=settings.default_map_center_lat, lng=settings.default_map_center_lng),
        zoom=settings.default_map_zoom,
        tile_layers={name: TileLayer(**layer) for name, layer in TileLayers.all().items()},
    )


@router.post(
    "/center",
    response_model=MapViewResponse,
    summary="Center the map on a location",
    description="Used after the browser reports the user's current position or a search hit is picked.",
)
async def center_map(location: LatLng) -> MapViewResponse:
    return MapViewResponse(center=location, zoom=settings.default_map_zoom)
