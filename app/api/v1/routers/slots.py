"""
API router for monitoring window (slot) arithmetic.
"""
from fastapi import APIRouter

from app.api.v1.models.requests import SlotRequest, SlotValidationRequest
from app.api.v1.models.responses import SlotResponse, SlotValidationResponse
from app.services.domain.slot_calculator import SLOT_LENGTH_DAYS, compute_slot, validate_slot


router = APIRouter(
    prefix="/slots",
    tags=["slots"],
)


@router.post(
    "",
    response_model=SlotResponse,
    summary="Compute a monitoring window",
    description="The window covers 14 calendar days starting at `from` (so `to = from + 13 days`).",
    responses={422: {"description": "Missing start date"}},
)
async def compute_monitoring_slot(request: SlotRequest) -> SlotResponse:
    slot = compute_slot(request.from_date)
    return SlotResponse(
        from_date=slot.from_date,
        to_date=slot.to_date,
        length_days=SLOT_LENGTH_DAYS,
    )


@router.post(
    "/validate",
    response_model=SlotValidationResponse,
    summary="Validate a monitoring window",
    responses={422: {"description": "Missing dates or window is not exactly 14 days"}},
)
async def validate_monitoring_slot(request: SlotValidationRequest) -> SlotValidationResponse:
    valid = validate_slot(request.from_date, request.to_date)
    return SlotValidationResponse(
        valid=valid,
        from_date=request.from_date,
        to_date=request.to_date,
    )
