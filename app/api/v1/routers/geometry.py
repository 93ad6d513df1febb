"""
API router for boundary validation, distance measurement and grid rasterization.
"""
from fastapi import APIRouter

from app.api.dependencies import GridRasterizerDep
from app.api.v1.models.requests import BoundaryRequest, GridRequest, MeasurementRequest
from app.api.v1.models.responses import (
    BoundaryResponse,
    GridCellResponse,
    GridResponse,
    GridSummaryResponse,
    MeasurementResponse,
)
from app.services.domain.boundary_validator import validate_boundary
from app.services.domain.distance_measurer import Measurement
from app.services.domain.grid_rasterizer import summarize_cells
from app.utils.geojson import ring_from_geojson, ring_to_geojson
from app.utils.geometry import bounding_box, is_closed, ring_vertices


router = APIRouter(tags=["geometry"])

INVALID_INPUT_RESPONSES = {
    422: {"description": "Invalid geometry or request body"},
}


@router.post(
    "/boundaries/validate",
    response_model=BoundaryResponse,
    summary="Validate a drawn field boundary",
    description="""
    Check a freshly drawn polygon before it is attached to a field.

    The outer ring must have at least three distinct vertices and no two
    consecutive identical points. The ring is returned exactly as drawn.
    """,
    responses=INVALID_INPUT_RESPONSES,
)
async def validate_field_boundary(request: BoundaryRequest) -> BoundaryResponse:
    boundary = validate_boundary(ring_from_geojson(request.boundary))
    return BoundaryResponse(
        boundary=ring_to_geojson(boundary.ring),
        vertex_count=len(ring_vertices(boundary.ring)),
        closed=is_closed(boundary.ring),
        area_hectares=boundary.area_hectares,
        bounding_box=list(bounding_box(boundary.ring)),
    )


@router.post(
    "/measurements",
    response_model=MeasurementResponse,
    summary="Measure a drawn path",
    description="Cumulative great-circle (haversine) length of a polyline in meters.",
)
async def measure_path(request: MeasurementRequest) -> MeasurementResponse:
    measurement = Measurement.from_points([p.as_point() for p in request.points])
    return MeasurementResponse(
        point_count=len(measurement.points),
        total_meters=measurement.total_meters,
        kilometers=measurement.kilometers,
        label=measurement.label,
    )


@router.post(
    "/grids",
    response_model=GridResponse,
    summary="Rasterize an index series over a boundary",
    description="""
    Split the boundary's bounding box into rows x cols cells and return the
    cells whose center lies inside the boundary.

    Each cell takes `series[(row * cols + col) % len(series)]`, or 0 when the
    series is empty, and is classified as poor (< 0.3), low (< 0.4),
    fair (< 0.7) or excellent.
    """,
    responses=INVALID_INPUT_RESPONSES,
)
async def rasterize_grid(
    request: GridRequest,
    rasterizer: GridRasterizerDep,
) -> GridResponse:
    boundary = validate_boundary(ring_from_geojson(request.boundary))
    rows = request.rows or rasterizer.config.rows
    cols = request.cols or rasterizer.config.cols
    cells = rasterizer.rasterize(boundary, request.series, rows=rows, cols=cols)
    return GridResponse(
        rows=rows,
        cols=cols,
        cells=[GridCellResponse.from_cell(cell) for cell in cells],
        summary=GridSummaryResponse.from_summary(summarize_cells(cells)),
    )
