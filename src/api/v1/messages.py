"""Broadcast and individual messaging endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request

from src.models.messages import BroadcastRequest, DispatchResult, IndividualMessageRequest
from src.services.contacts import ContactNotFound
from src.services.notifications import ContactNotifier, NoEmergencyContacts

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])


def _notifier(request: Request) -> ContactNotifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        raise HTTPException(status_code=503, detail="Messaging not available")
    return notifier


@router.post("/broadcast", response_model=DispatchResult)
async def send_broadcast(body: BroadcastRequest, request: Request) -> DispatchResult:
    """Send one message to all contacts, or to ``contact_ids`` only."""
    try:
        return await _notifier(request).send_broadcast(body)
    except NoEmergencyContacts as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None


@router.post("/individual", response_model=DispatchResult)
async def send_individual(
    body: IndividualMessageRequest, request: Request
) -> DispatchResult:
    """Send a message to a single contact."""
    try:
        return await _notifier(request).send_individual(body)
    except ContactNotFound:
        raise HTTPException(status_code=404, detail="Contact not found") from None
