"""
Global error handling middleware.

Maps exceptions escaping the routers to JSON error bodies of the form
{"error": ..., "detail": ...}:

    InvalidGeometry, InvalidDateRange -> 422
    other ValueError                  -> 400
    ExternalAPIError                  -> upstream-derived status
    anything else                     -> 500
"""
import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable

from app.domain.exceptions import InvalidDateRange, InvalidGeometry
from app.infrastructure.http_client import ExternalAPIError


logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail},
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Domain validation errors become client errors; failures of the records
    backend or geocoder keep the status chosen by the HTTP client.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_info = {"path": request.url.path, "method": request.method}
        try:
            return await call_next(request)

        except ExternalAPIError as e:
            logger.error(
                f"External API error: {e.message}",
                extra={**request_info, "status_code": e.status_code},
            )
            return _error_response(e.status_code, "External API error", e.message)

        except (InvalidGeometry, InvalidDateRange) as e:
            # Rejected drawings and windows are routine, not server problems
            logger.info(f"{type(e).__name__}: {e}", extra=request_info)
            return _error_response(
                status.HTTP_422_UNPROCESSABLE_ENTITY, type(e).__name__, str(e)
            )

        except ValueError as e:
            logger.warning(f"Validation error: {e}", extra=request_info)
            return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", str(e))

        except Exception as e:
            logger.exception(f"Unhandled exception: {e}", extra=request_info)
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                "An unexpected error occurred",
            )
