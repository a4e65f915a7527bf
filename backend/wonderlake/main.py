"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wonderlake.config import get_settings
from wonderlake.api.v1 import router as api_v1_router
from wonderlake.geo.boundaries import load_boundaries
from wonderlake.geo.classifier import SpatialClassifier
from wonderlake.geo.geocoder import NominatimGeocoder

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("wonderlake")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: boundary polygons are read once and shared by every request.
    logger.info(f"Starting {settings.APP_NAME}...")
    app.state.boundaries = load_boundaries(settings.BOUNDARY_DATA_DIR)
    app.state.classifier = SpatialClassifier(
        app.state.boundaries,
        service_radius_miles=settings.SERVICE_RADIUS_MILES,
    )
    app.state.geocoder = NominatimGeocoder(
        base_url=settings.GEOCODER_BASE_URL,
        user_agent=settings.GEOCODER_USER_AGENT,
        timeout=settings.GEOCODER_TIMEOUT_SECONDS,
        limit=settings.GEOCODER_RESULT_LIMIT,
        bbox_margin_deg=settings.GEOCODER_BBOX_MARGIN_DEG,
    )
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Annexation information, address check and resident outreach for Wonder Lake, IL",
    version="1.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(api_v1_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.APP_NAME}
