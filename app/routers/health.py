# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# The health check answers even when the database or configuration is
# broken; it reports the problem instead of failing.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import Settings, get_settings
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


# =============================================================================
# Response Models
# =============================================================================

class ComponentStatus(BaseModel):
    status: str
    message: str = ""


class ConfigStatus(BaseModel):
    status: str
    missing: list[str] = []


class HealthResponse(BaseModel):
    """System health check response."""
    status: str
    timestamp: str
    environment: str
    api: ComponentStatus
    database: ComponentStatus
    config: ConfigStatus


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Checks
# =============================================================================

def check_database(config: Settings) -> ComponentStatus:
    """Run a one-row query against the properties table."""
    if not config.supabase_configured:
        return ComponentStatus(status="not_configured", message="Database credentials not configured")

    try:
        client = SupabaseClient.get_client()
        client.table("properties").select("id").limit(1).execute()
    except Exception as e:
        logger.error(f"Health check database query failed: {e}")
        return ComponentStatus(status="error", message="Database query failed")

    return ComponentStatus(status="ok", message="Connected successfully")


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health-check", response_model=HealthResponse)
async def health_check(config: Settings = Depends(get_settings)):
    """
    System health check.

    Reports API, database and configuration status. Always answers:
    unexpected failures come back as 500 {"status": "error", "message"}.
    """
    try:
        missing = config.missing_required
        return HealthResponse(
            status="ok",
            timestamp=utc_now_iso(),
            environment=config.ENVIRONMENT,
            api=ComponentStatus(status="ok"),
            database=check_database(config),
            config=ConfigStatus(status="incomplete" if missing else "ok", missing=missing),
        )
    except Exception as e:
        logger.exception(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "An unexpected error occurred"},
        )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=utc_now_iso(),
    )
