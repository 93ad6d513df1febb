"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample rings and GeoJSON boundaries
- Sample field records and predictions
- Mock records client
- FastAPI test client
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.main import app
from app.domain.models import FieldRecord, Prediction
from app.infrastructure.records_api_client import RecordsAPIClient
from app.services.domain.grid_rasterizer import GridRasterizer, RasterConfig


# ============================================================
# Sample Geometry Fixtures
# ============================================================

@pytest.fixture
def square_ring() -> list[tuple[float, float]]:
    """2x2 degree square in (lat, lng) order, not closed."""
    return [(0.0, 0.0), (0.0, 2.0), (2.0, 2.0), (2.0, 0.0)]


@pytest.fixture
def triangle_ring() -> list[tuple[float, float]]:
    """Right triangle covering the lower-left half of a 1x1 box."""
    return [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0)]


@pytest.fixture
def field_geojson() -> dict:
    """Small closed field polygon near Lahore, GeoJSON [lng, lat] order."""
    return {
        "type": "Polygon",
        "coordinates": [[
            [74.3400, 31.5470],
            [74.3450, 31.5470],
            [74.3450, 31.5510],
            [74.3400, 31.5510],
            [74.3400, 31.5470],
        ]],
    }


# ============================================================
# Sample Records Fixtures
# ============================================================

@pytest.fixture
def sample_field(field_geojson) -> FieldRecord:
    """A stored field record."""
    return FieldRecord(**{
        "_id": "field-1",
        "name": "North Block",
        "crop": "wheat",
        "boundary": field_geojson,
        "from": "2025-01-01",
        "to": "2025-01-14",
    })


@pytest.fixture
def sample_predictions() -> list[Prediction]:
    """Two predictions for field-1 (out of order) and one for another field."""
    return [
        Prediction(**{
            "_id": "p2",
            "field": {"_id": "field-1", "name": "North Block"},
            "createdAt": "2025-02-01T10:00:00Z",
            "result": {"ndvi": 0.72, "ndvi_series": [0.2, 0.35, 0.5, 0.8]},
        }),
        Prediction(**{
            "_id": "p1",
            "field": "field-1",
            "createdAt": "2025-01-15T10:00:00Z",
            "result": {"ndvi": 0.31, "ndvi_series": [0.1]},
        }),
        Prediction(**{
            "_id": "p3",
            "field": "field-2",
            "createdAt": "2025-03-01T10:00:00Z",
            "result": {"ndvi": 0.9, "ndvi_series": [0.9]},
        }),
    ]


@pytest.fixture
def rasterizer() -> GridRasterizer:
    """Rasterizer with explicit defaults, independent of environment settings."""
    return GridRasterizer(RasterConfig(rows=15, cols=15, empty_series_value=0.0))


# ============================================================
# Mock Client Fixtures
# ============================================================

@pytest.fixture
def mock_records_client(sample_field, sample_predictions):
    """Create a mock records backend client."""
    mock_client = AsyncMock(spec=RecordsAPIClient)
    mock_client.get_field.return_value = sample_field
    mock_client.get_latest_prediction.return_value = sample_predictions[0]
    mock_client.create_field.side_effect = lambda record: record.model_copy(update={"id": "new-field"})
    mock_client.update_field.side_effect = lambda field_id, changes: sample_field.model_copy(
        update={"name": changes.get("name", sample_field.name)}
    )
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
