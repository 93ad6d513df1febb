"""
Calendar date normalization.

Dates are UTC calendar dates. Aware datetimes are converted to UTC before
taking the date, naive datetimes are assumed to already be UTC, so windows
never shift with the server's local timezone or DST.
"""
from datetime import date, datetime, timezone
from typing import Union

from app.domain.exceptions import InvalidDateRange

DateLike = Union[date, datetime, str]


def to_calendar_date(value: DateLike) -> date:
    """
    Normalize a date, datetime or ISO-8601 string to a UTC calendar date.

    Raises:
        InvalidDateRange: If a string cannot be parsed
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidDateRange(f"Not an ISO-8601 date: {value!r}") from e

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    return value
