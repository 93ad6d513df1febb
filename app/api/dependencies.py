"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.infrastructure.geocoding_client import GeocodingClient, get_geocoding_client
from app.infrastructure.records_api_client import RecordsAPIClient, get_records_client
from app.services.application.field_service import FieldService
from app.services.domain.grid_rasterizer import GridRasterizer


def get_grid_rasterizer() -> GridRasterizer:
    """
    Dependency factory for GridRasterizer.

    Returns:
        GridRasterizer configured from settings
    """
    return GridRasterizer()


def get_field_service(
    records_client: Annotated[RecordsAPIClient, Depends(get_records_client)],
    rasterizer: Annotated[GridRasterizer, Depends(get_grid_rasterizer)],
) -> FieldService:
    """
    Dependency factory for FieldService.

    Args:
        records_client: Records backend client (injected)
        rasterizer: Grid rasterizer (injected)

    Returns:
        FieldService instance
    """
    return FieldService(records_client=records_client, rasterizer=rasterizer)


# Type aliases for cleaner route signatures
GridRasterizerDep = Annotated[GridRasterizer, Depends(get_grid_rasterizer)]
FieldServiceDep = Annotated[FieldService, Depends(get_field_service)]
GeocodingClientDep = Annotated[GeocodingClient, Depends(get_geocoding_client)]
