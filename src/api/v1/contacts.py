"""Emergency contact and profile endpoints.

All routes are nested under ``/users/{user_id}``; a contact id that
belongs to a different user is reported as not found.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from src.models.contacts import ContactCreate, ContactUpdate, EmergencyContact, UserProfile
from src.services.contacts import ContactBook, ContactNotFound

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users/{user_id}", tags=["emergency-contacts"])


class ProfileUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


def _contact_book(request: Request) -> ContactBook:
    book = getattr(request.app.state, "contacts", None)
    if book is None:
        raise HTTPException(status_code=503, detail="Contact book not available")
    return book


@router.get("/contacts", response_model=list[EmergencyContact])
async def list_contacts(user_id: str, request: Request) -> list[EmergencyContact]:
    """List the user's emergency contacts, primary contacts first."""
    return _contact_book(request).list_contacts(user_id)


@router.post("/contacts", response_model=EmergencyContact, status_code=201)
async def add_contact(
    user_id: str, body: ContactCreate, request: Request
) -> EmergencyContact:
    """Register a new emergency contact."""
    return _contact_book(request).add_contact(user_id, body)


@router.patch("/contacts/{contact_id}", response_model=EmergencyContact)
async def update_contact(
    user_id: str, contact_id: str, body: ContactUpdate, request: Request
) -> EmergencyContact:
    try:
        return _contact_book(request).update_contact(user_id, contact_id, body)
    except ContactNotFound:
        raise HTTPException(status_code=404, detail="Contact not found") from None


@router.delete("/contacts/{contact_id}", status_code=204)
async def delete_contact(user_id: str, contact_id: str, request: Request) -> Response:
    try:
        _contact_book(request).remove_contact(user_id, contact_id)
    except ContactNotFound:
        raise HTTPException(status_code=404, detail="Contact not found") from None
    return Response(status_code=204)


@router.get("/profile", response_model=UserProfile)
async def get_profile(user_id: str, request: Request) -> UserProfile:
    profile = _contact_book(request).get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/profile", response_model=UserProfile)
async def save_profile(user_id: str, body: ProfileUpdate, request: Request) -> UserProfile:
    """Create or replace the name shown to contacts in alerts and messages."""
    profile = UserProfile(user_id=user_id, **body.model_dump())
    return _contact_book(request).save_profile(profile)
