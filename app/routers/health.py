# =============================================================================
# app/routers/health.py - Welcome and Health Endpoints
# =============================================================================
# GET /        fixed welcome payload
# GET /health  shallow liveness check, also the keep-alive ping target
#
# /health deliberately checks no dependencies: it must answer as long as
# the process is serving.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class WelcomeResponse(BaseModel):
    """Root endpoint response."""
    message: str


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    service: str


def utc_timestamp() -> str:
    """Current UTC instant as ISO-8601 with millisecond precision, e.g. 2024-01-15T10:30:00.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/", response_model=WelcomeResponse)
async def root():
    """Identify the service."""
    return WelcomeResponse(message=f"Welcome to {settings.SERVICE_NAME}")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns status, the time the request was handled and the service name.
    """
    return HealthResponse(
        status="OK",
        timestamp=utc_timestamp(),
        service=settings.SERVICE_NAME,
    )
