"""
Application service: Orchestration layer for field operations.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
import logging

from app.domain.exceptions import InvalidDateRange
from app.domain.models import Boundary, CropType, FieldRecord, HealthBand, Point, Slot
from app.infrastructure.records_api_client import RecordsAPIClient
from app.services.domain.boundary_validator import validate_boundary
from app.services.domain.grid_rasterizer import (
    GridCell,
    GridRasterizer,
    GridSummary,
    classify_health,
    summarize_cells,
)
from app.services.domain.slot_calculator import (
    SLOT_OFFSET,
    compute_slot,
    days_remaining,
    reanchor_slot,
    validate_slot,
)
from app.utils.geojson import ring_from_geojson, ring_to_geojson

logger = logging.getLogger(__name__)


@dataclass
class FieldGrid:
    """Rasterized view of one field's latest prediction."""
    field: FieldRecord
    boundary: Boundary
    cells: List[GridCell]
    summary: GridSummary
    current_index: Optional[float]
    current_band: Optional[HealthBand]
    days_remaining: Optional[int] = None


class FieldService:
    """
    Application service for field-related operations.

    Orchestrates data fetching and business logic execution.
    Follows the application layer pattern - no business logic here,
    only coordination between infrastructure and domain layers.
    """

    def __init__(
        self,
        records_client: RecordsAPIClient,
        rasterizer: GridRasterizer,
    ):
        """
        Initialize the service with dependencies.

        Args:
            records_client: Records backend client for persistence
            rasterizer: Grid rasterizer for index layout
        """
        self.records_client = records_client
        self.rasterizer = rasterizer

    async def list_fields(self, name_filter: Optional[str] = None) -> List[FieldRecord]:
        """
        List stored fields, optionally narrowed by name.

        Args:
            name_filter: Case-insensitive substring of the field name;
                blank or None returns every field

        Returns:
            Matching fields in backend order
        """
        fields = await self.records_client.list_fields()
        needle = (name_filter or "").strip().lower()
        if not needle:
            return fields

        matches = [field for field in fields if needle in field.name.lower()]
        logger.debug(f"Name filter {name_filter!r} kept {len(matches)} of {len(fields)} fields")
        return matches

    async def get_field_grid(
        self,
        field_id: str,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
        today: Optional[date] = None,
    ) -> FieldGrid:
        """
        Rasterize the latest index series of a field.

        This method orchestrates:
        1. Fetching the field record
        2. Fetching its latest prediction
        3. Converting and validating the stored boundary
        4. Rasterizing the prediction's NDVI series
        5. Counting the days left in the monitoring window

        Args:
            today: Reference date for days_remaining (defaults to the UTC date)

        Raises:
            ExternalAPIError: If data fetching fails
            InvalidGeometry: If the stored boundary is unusable
        """
        field = await self.records_client.get_field(field_id)
        prediction = await self.records_client.get_latest_prediction(field_id)

        boundary = validate_boundary(ring_from_geojson(field.boundary))
        series = prediction.result.ndvi_series if prediction else []
        cells = self.rasterizer.rasterize(boundary, series, rows=rows, cols=cols)

        current_index = prediction.result.ndvi if prediction else None
        return FieldGrid(
            field=field,
            boundary=boundary,
            cells=cells,
            summary=summarize_cells(cells),
            current_index=current_index,
            current_band=classify_health(current_index) if current_index is not None else None,
            days_remaining=self._days_remaining(field, today),
        )

    async def create_field(
        self,
        name: str,
        crop: CropType,
        ring: Sequence[Point],
        from_date: Optional[date],
    ) -> FieldRecord:
        """
        Validate a drawn boundary and monitoring window, then persist the field.

        Raises:
            InvalidGeometry: If the boundary is invalid
            InvalidDateRange: If no start date is given
            ExternalAPIError: If persisting fails
        """
        boundary = validate_boundary(ring)
        slot = compute_slot(from_date)

        record = FieldRecord(
            name=name,
            crop=crop,
            boundary=ring_to_geojson(boundary.ring),
            from_date=slot.from_date,
            to_date=slot.to_date,
        )
        created = await self.records_client.create_field(record)
        logger.info(f"Created field {created.id} ({name}, {crop.value}, {boundary.area_hectares:.2f} ha)")
        return created

    async def update_field(
        self,
        field_id: str,
        name: Optional[str] = None,
        crop: Optional[CropType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> FieldRecord:
        """
        Edit name, crop or monitoring window; the boundary cannot change.

        When only from_date is given the window is re-anchored. When both
        dates are given they must form a valid 14-day window.

        Raises:
            InvalidDateRange: If to_date is given without from_date, or the pair is invalid
            ExternalAPIError: If persisting fails
        """
        changes: Dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if crop is not None:
            changes["crop"] = crop.value
        if from_date is not None:
            slot = self._resolve_slot(from_date, to_date)
            changes["from"] = slot.from_date.isoformat()
            changes["to"] = slot.to_date.isoformat()
        elif to_date is not None:
            raise InvalidDateRange("The end date is derived from the start date and cannot be set alone")

        if not changes:
            raise ValueError("No changes supplied")

        return await self.records_client.update_field(field_id, changes)

    async def delete_field(self, field_id: str) -> None:
        await self.records_client.delete_field(field_id)
        logger.info(f"Deleted field {field_id}")

    @staticmethod
    def _days_remaining(field: FieldRecord, today: Optional[date]) -> Optional[int]:
        if field.from_date is None and field.to_date is None:
            return None
        if field.to_date is None:
            slot = compute_slot(field.from_date)
        else:
            slot = Slot(from_date=field.from_date or field.to_date - SLOT_OFFSET, to_date=field.to_date)
        return days_remaining(slot, today or datetime.now(timezone.utc).date())

    @staticmethod
    def _resolve_slot(from_date: date, to_date: Optional[date]) -> Slot:
        if to_date is None:
            return reanchor_slot(from_date)
        validate_slot(from_date, to_date)
        return compute_slot(from_date)
