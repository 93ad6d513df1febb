"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.api.rate_limit import limiter
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.api.v1.routers import fields, geometry, locations, map_view, slots

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Grid defaults: {settings.grid_rows}x{settings.grid_cols}, "
                f"empty series value={settings.grid_empty_series_value}")
    logger.info(f"Records API: {settings.records_api_base_url}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from app.infrastructure.geocoding_client import get_geocoding_client
    from app.infrastructure.records_api_client import get_records_client
    logger.info("Shutting down application...")
    await get_records_client().close()
    await get_geocoding_client().close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="""
    Field Boundary & Vegetation-Index Grid API

    Lets a farm operator draw a field boundary on a map and see per-cell
    vegetation-index estimates inside it.

    ## Features

    - **Boundary Validation**: At least three distinct vertices, no zero-length edges
    - **Grid Rasterization**: Bounding box split into rows x cols cells, clipped to the
      boundary by cell center, values taken cyclically from an index series and
      classified into poor / low / fair / excellent health bands
    - **Distance Measurement**: Haversine length of a drawn path
    - **Monitoring Windows**: Fixed 14-day slots computed from a start date
    - **Location Search**: Proxy to a Nominatim geocoder, rate limited

    Geometry is exchanged as GeoJSON (longitude first); dates as ISO-8601.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(geometry.router, prefix="/api/v1")
app.include_router(slots.router, prefix="/api/v1")
app.include_router(fields.router, prefix="/api/v1")
app.include_router(locations.router, prefix="/api/v1")
app.include_router(map_view.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
