"""Nearby safe places and safety zone endpoints.

``/safe-places`` runs the full search for a reported position.
``/zone`` re-classifies a place list the client already holds, so the
dashboard can refresh the zone as the user moves without searching
again.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from src.models.geo import SafePlace, ZoneStatus
from src.services.safety import SafetyAssessment, SafetyAssessmentService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/nearby", tags=["nearby-safe-places"])


class ZoneRequest(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    places: list[SafePlace] = Field(default_factory=list)


def _safety_service(request: Request) -> SafetyAssessmentService:
    safety = getattr(request.app.state, "safety", None)
    if safety is None:
        raise HTTPException(status_code=503, detail="Safety service not available")
    return safety


@router.get("/safe-places", response_model=SafetyAssessment)
async def find_safe_places(
    request: Request,
    latitude: float | None = Query(default=None),
    longitude: float | None = Query(default=None),
) -> SafetyAssessment:
    """Find nearby police stations, hospitals and government offices.

    Searches within 20 km and widens to 50 km when nothing is found.
    Returns at most eight places, nearest first, plus the safety zone.
    A missing location or an unavailable provider yields an empty list,
    an ``unknown`` zone and an ``error`` message; ``retryable`` tells the
    client to offer a retry.
    """
    safety = _safety_service(request)
    return await safety.assess(latitude, longitude)


@router.post("/zone", response_model=ZoneStatus)
async def classify_zone(body: ZoneRequest) -> ZoneStatus:
    """Classify the safety zone for a position and a known place list."""
    return SafetyAssessmentService.classify(body.latitude, body.longitude, body.places)
