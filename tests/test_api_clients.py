"""
Unit tests for the external API clients.

Tests cover:
- Successful API responses
- Retry logic on 5xx errors
- No retry on 4xx errors
- Async context manager
- Latest-prediction selection
- Malformed records backend payloads
- Location search
"""
import json

import pytest
import httpx
import respx
from unittest.mock import AsyncMock

from app.domain.models import CropType, FieldRecord, GeocodeResult
from app.infrastructure.geocoding_client import GeocodingClient, get_geocoding_client
from app.infrastructure.http_client import BaseAPIClient, ExternalAPIError
from app.infrastructure.records_api_client import (
    PredictionsUnavailable,
    RecordsAPIClient,
    get_records_client,
)


BASE_URL = "http://records.test"
GEOCODER_URL = "http://geocoder.test"


def _prediction(prediction_id, field, created_at, ndvi):
    return {
        "_id": prediction_id,
        "field": field,
        "createdAt": created_at,
        "result": {"ndvi": ndvi, "ndvi_series": [ndvi]},
    }


# ============================================================
# Client Initialization Tests
# ============================================================

class TestClientInitialization:
    """Tests for client initialization."""

    def test_bearer_token_header(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="secret")
        assert client.client.headers["Authorization"] == "Bearer secret"

    def test_no_auth_header_without_token(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        assert "Authorization" not in client.client.headers

    def test_singleton_pattern(self):
        import app.infrastructure.records_api_client as records_module
        import app.infrastructure.geocoding_client as geocoding_module
        records_module._records_client = None
        geocoding_module._geocoding_client = None

        assert get_records_client() is get_records_client()
        assert get_geocoding_client() is get_geocoding_client()

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        client = BaseAPIClient(BASE_URL)
        client.close = AsyncMock()

        async with client as ctx_client:
            assert ctx_client is client

        client.close.assert_called_once()


# ============================================================
# Retry and Error Handling Tests
# ============================================================

class TestErrorHandling:
    """Tests for error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_error_no_retry(self):
        """4xx errors should not trigger retry."""
        client = BaseAPIClient(BASE_URL)
        respx.get(f"{BASE_URL}/test").mock(return_value=httpx.Response(404, text="Not Found"))

        with pytest.raises(ExternalAPIError, match="404") as exc_info:
            await client.request("GET", "/test")

        assert exc_info.value.status_code == 404
        assert respx.calls.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_error_triggers_retry(self):
        """5xx errors should trigger retry."""
        client = BaseAPIClient(BASE_URL)
        route = respx.get(f"{BASE_URL}/test")
        route.side_effect = [
            httpx.Response(500, text="Internal Server Error"),
            httpx.Response(200, json={"result": "success"}),
        ]

        result = await client.request("GET", "/test")

        assert result == {"result": "success"}
        assert respx.calls.call_count == 2
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_body_returns_none(self):
        client = BaseAPIClient(BASE_URL)
        respx.delete(f"{BASE_URL}/thing").mock(return_value=httpx.Response(204))

        assert await client.request("DELETE", "/thing") is None
        await client.close()


# ============================================================
# Records API Tests
# ============================================================

class TestRecordsAPIClient:
    """Tests for the records backend client."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_field(self, field_geojson):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/slots/field-1").mock(return_value=httpx.Response(200, json={
            "_id": "field-1",
            "name": "North Block",
            "crop": "sugarcane",
            "boundary": field_geojson,
            "from": "2025-01-01T00:00:00.000Z",
            "to": "2025-01-14T00:00:00.000Z",
        }))

        field = await client.get_field("field-1")

        assert isinstance(field, FieldRecord)
        assert field.id == "field-1"
        assert field.crop is CropType.SUGARCANE
        assert field.boundary.coordinates == field_geojson["coordinates"]
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_crop_is_unset(self, field_geojson):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/slots/f1").mock(return_value=httpx.Response(200, json={
            "_id": "f1",
            "name": "Unplanted",
            "crop": "",
            "boundary": field_geojson,
        }))

        field = await client.get_field("f1")

        assert field.crop is None
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_field_is_upstream_error(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/slots/f1").mock(return_value=httpx.Response(200, json={
            "_id": "f1",
            "name": "No Boundary",
            "crop": "barley",
        }))

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.get_field("f1")

        assert exc_info.value.status_code == 502
        assert "FieldRecord" in exc_info.value.message
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_fields(self, field_geojson):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/slots").mock(return_value=httpx.Response(200, json=[
            {"_id": "f1", "name": "North Block", "crop": "wheat", "boundary": field_geojson},
            {"_id": "f2", "name": "South Block", "boundary": field_geojson},
        ]))

        fields = await client.list_fields()

        assert [f.id for f in fields] == ["f1", "f2"]
        assert fields[1].crop is None
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_list_field_listing_is_upstream_error(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/slots").mock(
            return_value=httpx.Response(200, json={"message": "unexpected"})
        )

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.list_fields()

        assert exc_info.value.status_code == 502
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_field_sends_aliases(self, sample_field):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        route = respx.post(f"{BASE_URL}/api/slots").mock(
            return_value=httpx.Response(201, json=sample_field.model_dump(mode="json", by_alias=True))
        )

        await client.create_field(sample_field.model_copy(update={"id": None}))

        sent = route.calls.last.request
        body = json.loads(sent.content)
        assert body["from"] == "2025-01-01"
        assert body["to"] == "2025-01-14"
        assert body["boundary"]["type"] == "Polygon"
        assert "_id" not in body
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_latest_prediction_for_field(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/predictions").mock(return_value=httpx.Response(200, json=[
            _prediction("p2", {"_id": "field-1"}, "2025-02-01T10:00:00Z", 0.6),
            _prediction("p3", "field-1", "2025-01-01T10:00:00Z", 0.3),
            _prediction("p4", "field-2", "2025-05-01T10:00:00Z", 0.9),
        ]))

        latest = await client.get_latest_prediction("field-1")

        assert latest.id == "p2"
        assert latest.result.ndvi == 0.6
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_latest_prediction_none(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/predictions").mock(return_value=httpx.Response(200, json=[]))

        assert await client.get_latest_prediction("field-1") is None
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_prediction_listing_is_not_a_missing_field(self):
        client = RecordsAPIClient(base_url=BASE_URL, token="")
        respx.get(f"{BASE_URL}/api/predictions").mock(return_value=httpx.Response(404))

        with pytest.raises(PredictionsUnavailable) as exc_info:
            await client.get_latest_prediction("field-1")

        assert exc_info.value.status_code == 502
        await client.close()


# ============================================================
# Geocoding Tests
# ============================================================

class TestGeocodingClient:
    """Tests for location search."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_parses_string_coordinates(self):
        client = GeocodingClient(base_url=GEOCODER_URL)
        route = respx.get(f"{GEOCODER_URL}/search").mock(return_value=httpx.Response(200, json=[
            {"place_id": 1, "display_name": "Lahore, Punjab, Pakistan", "lat": "31.5656", "lon": "74.3141"},
        ]))

        results = await client.search("  Lahore ")

        assert results == [GeocodeResult(place_id=1, display_name="Lahore, Punjab, Pakistan", lat=31.5656, lon=74.3141)]
        params = route.calls.last.request.url.params
        assert params["q"] == "Lahore"
        assert params["format"] == "json"
        await client.close()

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self):
        client = GeocodingClient(base_url=GEOCODER_URL)
        with pytest.raises(ValueError):
            await client.search("   ")
        await client.close()
