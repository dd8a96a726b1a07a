"""Emergency SOS API endpoints.

Alerts the user's emergency contacts with their location and keeps a
record of SOS incidents until the user resolves or cancels them.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from src.models.enums import IncidentStatus
from src.models.messages import DispatchResult, SOSIncident, SOSRequest
from src.services.notifications import (
    EMERGENCY_NUMBERS,
    ContactNotifier,
    IncidentNotFound,
    NoEmergencyContacts,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/emergency", tags=["emergency-sos"])


class IncidentUpdate(BaseModel):
    status: IncidentStatus


def _emergency_numbers() -> list[dict[str, str]]:
    return [{"name": name, "number": number} for name, number in EMERGENCY_NUMBERS]


def _notifier(request: Request) -> ContactNotifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        raise HTTPException(status_code=503, detail="Emergency notifier not available")
    return notifier


@router.get("/numbers")
async def emergency_numbers() -> dict:
    """National emergency numbers, available even when alerting is down."""
    return {"emergency_numbers": _emergency_numbers()}


@router.post("/sos", response_model=DispatchResult)
async def trigger_sos(body: SOSRequest, request: Request) -> DispatchResult:
    """Send an SOS alert to all of the user's emergency contacts.

    CALL 100 (POLICE) OR 1091 (WOMEN HELPLINE) IF IN IMMEDIATE DANGER.
    """
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "Emergency notifier not available",
                "emergency_numbers": _emergency_numbers(),
            },
        )

    try:
        return await notifier.send_sos(body)
    except NoEmergencyContacts as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None


@router.get("/incidents/{user_id}", response_model=list[SOSIncident])
async def list_incidents(user_id: str, request: Request) -> list[SOSIncident]:
    """List the user's SOS incidents, newest first."""
    return _notifier(request).list_incidents(user_id)


@router.patch("/incidents/{user_id}/{incident_id}", response_model=SOSIncident)
async def update_incident(
    user_id: str, incident_id: str, body: IncidentUpdate, request: Request
) -> SOSIncident:
    """Resolve or cancel an SOS incident."""
    try:
        return _notifier(request).update_incident(user_id, incident_id, body.status)
    except IncidentNotFound:
        raise HTTPException(status_code=404, detail="Incident not found") from None
