"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from pydantic import BaseModel

from core.config import settings
from core.exceptions import AppException
from infrastructure.supabase.context import SupabaseDataContext

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    gateway: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness check; does not touch the gateway."""
    return HealthResponse(
        status="healthy",
        version="1.0.0",
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check() -> HealthResponse:
    """Readiness check: runs one anonymous query against the gateway."""
    try:
        async with SupabaseDataContext() as ctx:
            await ctx.ping()
        gateway_status = "healthy"
    except AppException as exc:
        logger.warning("gateway_health_check_failed", error_code=exc.error_code.value)
        gateway_status = f"unhealthy: {exc.message}"

    return HealthResponse(
        status="healthy" if gateway_status == "healthy" else "degraded",
        version="1.0.0",
        timestamp=_now(),
        environment=settings.app_env,
        gateway=gateway_status,
    )
