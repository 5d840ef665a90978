# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from fastapi import APIRouter

from app.config import settings
from app.cors import preflight_response
from core.models.requests import HealthResponse
from lib.utils import utc_now_iso

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    Never touches the upstreams.
    """
    return HealthResponse(
        status="healthy",
        timestamp=utc_now_iso(),
        service=settings.SERVICE_NAME,
    )


@router.options("/health", include_in_schema=False)
async def health_options():
    return preflight_response("GET, OPTIONS")
