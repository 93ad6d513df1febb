"""
Domain service: the fixed 14-day monitoring window of a field.

`to` is always `from + 13 days`; both ends are UTC calendar dates
(see app.utils.dates).
"""
from datetime import timedelta
from typing import Optional
import logging

from app.domain.exceptions import InvalidDateRange
from app.domain.models import Slot
from app.utils.dates import DateLike, to_calendar_date

logger = logging.getLogger(__name__)

SLOT_LENGTH_DAYS = 14
SLOT_OFFSET = timedelta(days=SLOT_LENGTH_DAYS - 1)


def compute_slot(from_date: Optional[DateLike]) -> Slot:
    """
    Build the 14-day inclusive window starting at from_date.

    Raises:
        InvalidDateRange: If from_date is missing
    """
    if from_date is None or from_date == "":
        raise InvalidDateRange("A start date is required")

    start = to_calendar_date(from_date)
    return Slot(from_date=start, to_date=start + SLOT_OFFSET)


def validate_slot(from_date: Optional[DateLike], to_date: Optional[DateLike]) -> bool:
    """
    Check that to_date is exactly 13 days after from_date.

    Returns:
        True when the window is valid

    Raises:
        InvalidDateRange: If from_date is missing, or to_date is missing
            or not exactly from_date + 13 days
    """
    expected = compute_slot(from_date)
    if to_date is None or to_date == "":
        raise InvalidDateRange("An end date is required")

    end = to_calendar_date(to_date)
    if end != expected.to_date:
        raise InvalidDateRange(
            f"Window must span {SLOT_LENGTH_DAYS} days: expected end "
            f"{expected.to_date.isoformat()}, got {end.isoformat()}"
        )
    return True


def is_valid_slot(from_date: Optional[DateLike], to_date: Optional[DateLike]) -> bool:
    """Non-raising form of validate_slot."""
    try:
        return validate_slot(from_date, to_date)
    except InvalidDateRange:
        return False


def reanchor_slot(new_from: Optional[DateLike]) -> Slot:
    """
    Edit flow: the user changes the start date and the end is recomputed.

    Any end date the client sent is ignored.
    """
    slot = compute_slot(new_from)
    logger.debug(f"Re-anchored slot to {slot.from_date.isoformat()}..{slot.to_date.isoformat()}")
    return slot


def days_remaining(slot: Slot, today: DateLike) -> int:
    """Whole days from today until the end of the window, never negative."""
    return max(0, (slot.to_date - to_calendar_date(today)).days)
