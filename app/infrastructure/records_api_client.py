"""
Infrastructure layer: client for the field and prediction records backend.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel, ValidationError

from app.config import settings
from app.domain.models import FieldRecord, Prediction
from app.infrastructure.api_constants import RecordsAPIEndpoints
from app.infrastructure.http_client import BaseAPIClient, ExternalAPIError

logger = logging.getLogger(__name__)

RecordModel = TypeVar("RecordModel", bound=BaseModel)


class PredictionsUnavailable(ExternalAPIError):
    """Raised when the prediction listing cannot be fetched or read."""


class RecordsAPIClient(BaseAPIClient):
    """
    Client for the records backend that persists fields and predictions.

    Payloads that do not match the record models are reported as
    ExternalAPIError with status 502, never as validation errors of the
    caller's request.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        token = settings.records_api_token if token is None else token
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        super().__init__(base_url or settings.records_api_base_url, headers=headers)

    async def list_fields(self) -> List[FieldRecord]:
        """
        Fetch all fields of the current user.

        Returns:
            List of FieldRecord instances
        """
        data = await self.request("GET", RecordsAPIEndpoints.SLOTS)
        return self._parse_list(FieldRecord, data)

    async def get_field(self, field_id: str) -> FieldRecord:
        """
        Fetch a single field.

        Args:
            field_id: Unique identifier for the field

        Raises:
            ExternalAPIError: If the request fails (404 when unknown)
        """
        data = await self.request("GET", RecordsAPIEndpoints.get_slot(field_id))
        if not data:
            raise ExternalAPIError(f"Field {field_id} not found", status_code=404)
        return self._parse(FieldRecord, data)

    async def create_field(self, record: FieldRecord) -> FieldRecord:
        """Persist a new field and return it as stored."""
        data = await self.request(
            "POST",
            RecordsAPIEndpoints.SLOTS,
            json=self._serialize(record),
        )
        return self._parse(FieldRecord, data)

    async def update_field(self, field_id: str, changes: Dict[str, Any]) -> FieldRecord:
        """
        Update name/crop/window of a field.

        Args:
            field_id: Unique identifier for the field
            changes: JSON-ready partial record
        """
        data = await self.request(
            "PUT",
            RecordsAPIEndpoints.get_slot(field_id),
            json=changes,
        )
        return self._parse(FieldRecord, data)

    async def delete_field(self, field_id: str) -> None:
        await self.request("DELETE", RecordsAPIEndpoints.get_slot(field_id))

    async def list_predictions(self) -> List[Prediction]:
        """Fetch all predictions visible to the current user."""
        data = await self.request("GET", RecordsAPIEndpoints.PREDICTIONS)
        return self._parse_list(Prediction, data)

    async def get_latest_prediction(self, field_id: str) -> Optional[Prediction]:
        """
        Most recent prediction for a field, by creation time.

        Args:
            field_id: Unique identifier for the field

        Returns:
            The latest Prediction, or None if the field has none

        Raises:
            PredictionsUnavailable: If the prediction listing fails. A 404
                from the listing is reported as 502, since the field itself
                was not what went missing.
        """
        try:
            all_predictions = await self.list_predictions()
        except ExternalAPIError as e:
            status_code = 502 if e.status_code == 404 else e.status_code
            raise PredictionsUnavailable(
                f"Predictions unavailable: {e.message}",
                status_code=status_code,
            ) from e

        predictions = [p for p in all_predictions if p.field_id == str(field_id)]
        if not predictions:
            logger.debug(f"No predictions for field {field_id}")
            return None

        # Stable sort keeps backend order for missing timestamps
        predictions.sort(key=lambda p: p.created_at.timestamp() if p.created_at else float("-inf"))
        return predictions[-1]

    @staticmethod
    def _serialize(record: FieldRecord) -> Dict[str, Any]:
        return record.model_dump(mode="json", by_alias=True, exclude_none=True)

    @staticmethod
    def _parse(model: Type[RecordModel], data: Any) -> RecordModel:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed {model.__name__} from records API: {e}")
            raise ExternalAPIError(
                f"Records API returned a malformed {model.__name__}",
                status_code=502,
            ) from e

    @classmethod
    def _parse_list(cls, model: Type[RecordModel], data: Any) -> List[RecordModel]:
        if data is not None and not isinstance(data, list):
            raise ExternalAPIError(
                f"Records API returned {type(data).__name__} instead of a {model.__name__} list",
                status_code=502,
            )
        return [cls._parse(model, item) for item in data or []]


# Singleton instance
_records_client: Optional[RecordsAPIClient] = None


def get_records_client() -> RecordsAPIClient:
    """
    Get or create the singleton records client instance.

    Returns:
        RecordsAPIClient instance
    """
    global _records_client
    if _records_client is None:
        _records_client = RecordsAPIClient()
    return _records_client
