"""
Infrastructure layer: location search against a Nominatim-compatible service.
"""
from typing import List, Optional
import logging

from app.config import settings
from app.domain.models import GeocodeResult
from app.infrastructure.api_constants import GeocodingEndpoints
from app.infrastructure.http_client import BaseAPIClient

logger = logging.getLogger(__name__)


class GeocodingClient(BaseAPIClient):
    """Address/place name to coordinate lookup."""

    def __init__(self, base_url: Optional[str] = None):
        super().__init__(
            base_url or settings.geocoding_base_url,
            headers={"User-Agent": settings.geocoding_user_agent},
        )

    async def search(self, query: str, limit: Optional[int] = None) -> List[GeocodeResult]:
        """
        Search for places matching free text.

        Args:
            query: Free-text address or place name
            limit: Maximum results (defaults to settings)

        Returns:
            Matches in service ranking order (best first)

        Raises:
            ValueError: If the query is blank
            ExternalAPIError: If the request fails
        """
        query = query.strip()
        if not query:
            raise ValueError("Search query cannot be empty")

        data = await self.request(
            "GET",
            GeocodingEndpoints.SEARCH,
            params={
                "format": "json",
                "q": query,
                "limit": limit or settings.geocoding_result_limit,
            },
        )
        results = [GeocodeResult(**item) for item in data or []]
        logger.info(f"Location search {query!r}: {len(results)} results")
        return results


# Singleton instance
_geocoding_client: Optional[GeocodingClient] = None


def get_geocoding_client() -> GeocodingClient:
    """
    Get or create the singleton geocoding client instance.

    Returns:
        GeocodingClient instance
    """
    global _geocoding_client
    if _geocoding_client is None:
        _geocoding_client = GeocodingClient()
    return _geocoding_client
