"""
Domain errors.

Both are ValueError subclasses so callers that only care about "bad input"
can catch ValueError.
"""


class InvalidGeometry(ValueError):
    """Ring too short, zero-length edge, or degenerate bounding box."""
    pass


class InvalidDateRange(ValueError):
    """Missing anchor date or a window that is not exactly 14 days."""
    pass
