"""
API router for location search.
"""
from fastapi import APIRouter, Query, Request
from typing import Annotated

from app.api.dependencies import GeocodingClientDep
from app.api.rate_limit import PROXY_RATE_LIMIT, limiter
from app.api.v1.models.responses import LocationSearchResponse


router = APIRouter(
    prefix="/locations",
    tags=["locations"],
)


@router.get(
    "/search",
    response_model=LocationSearchResponse,
    summary="Search for a place",
    description="Free-text address or place search. Results are ordered best first; clients center the map on the first one.",
    responses={
        400: {"description": "Blank query"},
        429: {"description": "Rate limit exceeded"},
        502: {"description": "Geocoding service failure"},
    },
)
@limiter.limit(PROXY_RATE_LIMIT)
async def search_locations(
    request: Request,
    q: Annotated[str, Query(min_length=1, description="Address or place name")],
    geocoding_client: GeocodingClientDep,
) -> LocationSearchResponse:
    results = await geocoding_client.search(q)
    return LocationSearchResponse(query=q, results=results)
