"""
API router for stored fields.
"""
from fastapi import APIRouter, HTTPException, Path, Query, Response, status
from typing import Annotated, List, Optional

from app.api.dependencies import FieldServiceDep
from app.api.v1.models.requests import FieldCreateRequest, FieldUpdateRequest
from app.api.v1.models.responses import (
    FieldGridResponse,
    GridCellResponse,
    GridResponse,
    GridSummaryResponse,
)
from app.domain.models import FieldRecord
from app.infrastructure.http_client import ExternalAPIError
from app.infrastructure.records_api_client import PredictionsUnavailable
from app.utils.geojson import ring_from_geojson


router = APIRouter(
    prefix="/fields",
    tags=["fields"],
)

FieldId = Annotated[str, Path(description="Unique identifier for the field")]


def _upstream_error(field_id: str, error: ExternalAPIError) -> HTTPException:
    if isinstance(error, PredictionsUnavailable):
        return HTTPException(
            status_code=error.status_code,
            detail=f"Failed to fetch predictions for field '{field_id}': {error.message}"
        )
    if error.status_code == 404:
        return HTTPException(
            status_code=404,
            detail=f"Field with ID '{field_id}' not found"
        )
    return HTTPException(
        status_code=error.status_code,
        detail=f"Failed to reach records backend: {error.message}"
    )


@router.get(
    "",
    response_model=List[FieldRecord],
    summary="List fields",
    description="All stored fields, optionally narrowed to names containing `q` (case-insensitive).",
)
async def list_fields(
    field_service: FieldServiceDep,
    q: Annotated[Optional[str], Query(max_length=100, description="Name search term")] = None,
) -> List[FieldRecord]:
    return await field_service.list_fields(q)


@router.get(
    "/{field_id}/grid",
    response_model=FieldGridResponse,
    summary="Get the vegetation-index grid of a field",
    description="""
    Rasterize the NDVI series of the field's latest prediction over its boundary.

    This endpoint:
    1. Fetches the field and its predictions from the records backend
    2. Picks the most recent prediction
    3. Lays its NDVI series out over a rows x cols grid clipped to the boundary
    4. Reports the days left until the monitoring window ends
    """,
    responses={
        404: {"description": "Field not found"},
        422: {"description": "Stored boundary is not a usable polygon"},
        502: {"description": "Predictions could not be fetched or records are malformed"},
    },
)
async def get_field_grid(
    field_id: FieldId,
    field_service: FieldServiceDep,
    rows: Annotated[Optional[int], Query(ge=1, le=500)] = None,
    cols: Annotated[Optional[int], Query(ge=1, le=500)] = None,
) -> FieldGridResponse:
    try:
        field_grid = await field_service.get_field_grid(field_id, rows=rows, cols=cols)
    except ExternalAPIError as e:
        raise _upstream_error(field_id, e)

    field = field_grid.field
    rasterizer_config = field_service.rasterizer.config
    return FieldGridResponse(
        field_id=field.id or field_id,
        name=field.name,
        crop=field.crop,
        from_date=field.from_date,
        to_date=field.to_date,
        current_index=field_grid.current_index,
        current_band=field_grid.current_band,
        days_remaining=field_grid.days_remaining,
        grid=GridResponse(
            rows=rows or rasterizer_config.rows,
            cols=cols or rasterizer_config.cols,
            cells=[GridCellResponse.from_cell(cell) for cell in field_grid.cells],
            summary=GridSummaryResponse.from_summary(field_grid.summary),
        ),
    )


@router.post(
    "",
    response_model=FieldRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create a field",
    description="Validate the drawn boundary, derive the 14-day window from `from`, and persist the field.",
    responses={422: {"description": "Invalid boundary or missing start date"}},
)
async def create_field(
    request: FieldCreateRequest,
    field_service: FieldServiceDep,
) -> FieldRecord:
    return await field_service.create_field(
        name=request.name,
        crop=request.crop,
        ring=ring_from_geojson(request.boundary),
        from_date=request.from_date,
    )


@router.patch(
    "/{field_id}",
    response_model=FieldRecord,
    summary="Edit a field",
    description="Change name, crop or window start; `to` is always recomputed from `from`.",
    responses={
        404: {"description": "Field not found"},
        422: {"description": "Invalid monitoring window"},
    },
)
async def update_field(
    field_id: FieldId,
    request: FieldUpdateRequest,
    field_service: FieldServiceDep,
) -> FieldRecord:
    try:
        return await field_service.update_field(
            field_id,
            name=request.name,
            crop=request.crop,
            from_date=request.from_date,
            to_date=request.to_date,
        )
    except ExternalAPIError as e:
        raise _upstream_error(field_id, e)


@router.delete(
    "/{field_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a field",
    responses={404: {"description": "Field not found"}},
)
async def delete_field(
    field_id: FieldId,
    field_service: FieldServiceDep,
) -> Response:
    try:
        await field_service.delete_field(field_id)
    except ExternalAPIError as e:
        raise _upstream_error(field_id, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
