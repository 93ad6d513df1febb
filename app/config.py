"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Records backend (fields, slots, predictions)
    records_api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL for the field and prediction records API"
    )
    records_api_token: str = Field(
        default="",
        description="Bearer token forwarded to the records API"
    )

    # Geocoding
    geocoding_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL for the Nominatim-compatible geocoding service"
    )
    geocoding_user_agent: str = Field(
        default="field-grid-service/1.0",
        description="User-Agent sent to the geocoding service (required by Nominatim)"
    )
    geocoding_result_limit: int = Field(
        default=10,
        description="Maximum number of location search results"
    )

    # Retry Configuration
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for API calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Grid rasterization
    grid_rows: int = Field(
        default=15,
        description="Default number of grid rows over a field's bounding box"
    )
    grid_cols: int = Field(
        default=15,
        description="Default number of grid columns over a field's bounding box"
    )
    grid_empty_series_value: float = Field(
        default=0.0,
        description="Index value assigned to every cell when the series is empty"
    )

    # Map defaults
    default_map_center_lat: float = Field(
        default=31.9686,
        description="Latitude of the initial map view"
    )
    default_map_center_lng: float = Field(
        default=-99.9018,
        description="Longitude of the initial map view"
    )
    default_map_zoom: int = Field(
        default=4,
        description="Zoom level of the initial map view"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Field Grid Service",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
