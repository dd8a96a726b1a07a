"""Emergency contact and profile models.

Contacts are always owned by exactly one user; every lookup in the
contact book is scoped by ``user_id``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class EmergencyContact(BaseModel):
    """A trusted person to notify when the user raises an SOS."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=3, max_length=32)
    email: str | None = None
    relationship: str | None = None
    is_primary: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=3, max_length=32)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    relationship: str | None = None
    is_primary: bool = False


class ContactUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, min_length=3, max_length=32)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    relationship: str | None = None
    is_primary: bool | None = None


class UserProfile(BaseModel):
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def display_name(self) -> str:
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or "User"
