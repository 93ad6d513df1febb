"""
Infrastructure layer: base HTTP client with retry logic.
"""
from typing import Any, Dict, Optional
import logging
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from app.config import settings
from app.infrastructure.api_constants import APIConstants

logger = logging.getLogger(__name__)


class ExternalAPIError(Exception):
    """Raised when an external service call fails."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BaseAPIClient:
    """
    Async client for an external JSON API.
    Implements retry logic with exponential backoff on 5xx and transport errors.
    """

    def __init__(self, base_url: str, headers: Optional[Dict[str, str]] = None):
        """Initialize the underlying httpx client."""
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "accept": APIConstants.CONTENT_TYPE_JSON,
                **(headers or {}),
            },
            timeout=APIConstants.DEFAULT_TIMEOUT,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Any:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Decoded JSON body (None for empty bodies)

        Raises:
            ExternalAPIError: On 4xx responses
            httpx.HTTPStatusError, httpx.RequestError: When retries are exhausted
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                logger.warning(f"{method} {endpoint} failed with {e.response.status_code}, retrying")
                raise
            # Don't retry on client errors (4xx)
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        if not response.content:
            return None
        return response.json()

    async def request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Make a request, converting exhausted retries into ExternalAPIError.
        """
        try:
            return await self._make_request(method, endpoint, **kwargs)
        except httpx.HTTPStatusError as e:
            raise ExternalAPIError(
                f"API request failed after retries: {e.response.status_code}",
                status_code=502,
            )
        except httpx.RequestError as e:
            raise ExternalAPIError(f"API request error: {str(e)}", status_code=503)
