"""
API endpoint constants and configuration.

This module contains all external API endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


class RecordsAPIEndpoints:
    """Records backend endpoint paths (fields are stored as "slots")."""

    SLOTS = "/api/slots"
    SLOT_BY_ID = "/api/slots/{field_id}"
    PREDICTIONS = "/api/predictions"

    @classmethod
    def get_slot(cls, field_id: str) -> str:
        """
        Get the endpoint for a single field record.

        Args:
            field_id: Field ID

        Returns:
            Formatted endpoint path
        """
        return cls.SLOT_BY_ID.format(field_id=field_id)


class GeocodingEndpoints:
    """Nominatim endpoint paths."""

    SEARCH = "/search"


class TileLayers:
    """Basemap tile layers offered to map clients."""

    SATELLITE = {
        "url": "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        "attribution": "Tiles &copy; Esri",
        "label_url": "https://services.arcgisonline.com/ArcGIS/rest/services/Reference/World_Boundaries_and_Places/MapServer/tile/{z}/{y}/{x}",
    }
    VECTOR = {
        "url": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
        "attribution": "&copy; <a href='https://carto.com/attributions'>CARTO</a>",
        "label_url": None,
    }

    @classmethod
    def all(cls) -> dict:
        return {"satellite": cls.SATELLITE, "vector": cls.VECTOR}


class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Timeouts (in seconds)
    DEFAULT_TIMEOUT = 30.0
