"""Request and result models for SOS alerts and contact messaging."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from src.models.enums import EmailStatus, IncidentStatus


class SOSRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    message: str | None = Field(default=None, max_length=2000)
    media_url: str | None = None
    include_nearest_place: bool = True


class BroadcastRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    contact_ids: list[str] | None = Field(
        default=None,
        description="Restrict the broadcast to these contacts; all contacts when omitted",
    )


class IndividualMessageRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    contact_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


class EmailResult(BaseModel):
    contact_name: str
    contact_email: str
    status: EmailStatus
    message_id: str | None = None
    error: str | None = None


class NotificationRecord(BaseModel):
    contact_name: str
    contact_phone: str
    contact_email: str | None = None
    message: str
    sent_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    email_sent: bool


class DispatchResult(BaseModel):
    success: bool = True
    message: str
    contacts_notified: int
    emails_sent: int
    email_results: list[EmailResult] = Field(default_factory=list)
    notifications: list[NotificationRecord] = Field(default_factory=list)
    incident_id: str | None = None


class SOSIncident(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    latitude: float | None = None
    longitude: float | None = None
    status: IncidentStatus = IncidentStatus.ACTIVE
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
