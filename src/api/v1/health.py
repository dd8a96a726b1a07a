"""Health check endpoints for the WomenSafe API v1.

Provides liveness and readiness probes for container deployments.  The
readiness check reports whether the places provider and the email
provider are configured.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str
    uptime_seconds: float


class ReadinessResponse(BaseModel):
    """Readiness check response with individual service statuses."""

    status: str
    checks: dict[str, str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe.

    Returns 200 if the application process is running and able to
    handle requests.  Does *not* check downstream dependencies.
    """
    start_time: float = getattr(request.app.state, "start_time", time.time())
    uptime = time.time() - start_time

    return HealthResponse(
        status="healthy",
        version=request.app.version,
        uptime_seconds=round(uptime, 2),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness probe.

    Nearby search and SOS email delivery degrade gracefully when their
    providers are missing, so an unconfigured provider marks the
    instance ``degraded`` rather than not ready.
    """
    checks: dict[str, str] = {}
    all_ok = True

    safety = getattr(request.app.state, "safety", None)
    if safety is not None and safety.provider_configured:
        checks["places_provider"] = "ok"
    else:
        checks["places_provider"] = "not_configured"
        all_ok = False

    if getattr(request.app.state, "email", None) is not None:
        checks["email"] = "ok"
    else:
        checks["email"] = "not_configured"
        all_ok = False

    if getattr(request.app.state, "notifier", None) is not None:
        checks["notifier"] = "ok"
    else:
        checks["notifier"] = "not_initialised"
        all_ok = False

    status = "ready" if all_ok else "degraded"

    logger.info("health.readiness_check", status=status, checks=checks)

    return ReadinessResponse(status=status, checks=checks)
