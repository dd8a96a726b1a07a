"""SOS alerts and contact messaging.

Turns an SOS or a free-text message into an email for each of the
user's emergency contacts and sends them concurrently.  Contacts
without an email address are still listed in the dispatch record so the
client can offer to call or text them.

Message formats:
    * SOS: alert headline, the user's message (or a default plea), the
      current location link, an optional recording link, the nearest
      safe place when known, and the national emergency numbers.
    * Broadcast / individual: "Message from <name>", the message body and
      an optional location link.

SOS activations are also recorded as incidents (``active`` until the
user resolves or cancels them).
"""

from __future__ import annotations

import asyncio
import html
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta, timezone
from typing import Final

import structlog

from src.models.contacts import EmergencyContact
from src.models.enums import EmailStatus, IncidentStatus
from src.models.geo import SafePlace
from src.models.messages import (
    BroadcastRequest,
    DispatchResult,
    EmailResult,
    IndividualMessageRequest,
    NotificationRecord,
    SOSIncident,
    SOSRequest,
)
from src.services.contacts import ContactBook
from src.services.email import EmailDeliveryError, ResendEmailClient
from src.services.location import maps_link
from src.services.safety import SafetyAssessmentService

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME: Final[str] = "WomenSafe India"

EMERGENCY_NUMBERS: Final[tuple[tuple[str, str], ...]] = (
    ("Police", "100"),
    ("Ambulance", "108"),
    ("Women Helpline", "1091"),
)

DEFAULT_SOS_TEXT: Final[str] = "I need immediate help!"

# Upper bound on the optional nearest-place lookup before an SOS goes out.
DEFAULT_NEAREST_PLACE_TIMEOUT_S: Final[float] = 2.0

_IST: Final[timezone] = timezone(timedelta(hours=5, minutes=30), "IST")


class NoEmergencyContacts(LookupError):
    """The user has no contacts to notify."""


class IncidentNotFound(LookupError):
    """The SOS incident does not exist for this user."""


# ---------------------------------------------------------------------------
# Message composition
# ---------------------------------------------------------------------------


def _sent_footer(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(UTC)).astimezone(_IST).strftime("%d/%m/%Y, %I:%M:%S %p")
    return f"Sent via {APP_NAME} app - {stamp} IST"


def _numbers_text() -> str:
    return "\n".join(f"{label}: {number}" for label, number in EMERGENCY_NUMBERS)


def _numbers_html() -> str:
    return "<br>".join(f"{label}: {number}" for label, number in EMERGENCY_NUMBERS)


def describe_place(place: SafePlace) -> str:
    """One-line summary of a safe place for inclusion in an alert."""
    parts = [f"{place.name} ({place.category.value})"]
    if place.distance_label:
        parts.append(place.distance_label)
    parts.append(place.address)
    return ", ".join(parts)


def compose_sos(
    user_name: str,
    *,
    message: str | None = None,
    location_url: str | None = None,
    media_url: str | None = None,
    nearest_place: SafePlace | None = None,
) -> tuple[str, str, str]:
    """Build the subject, plain-text and HTML bodies of an SOS alert."""
    subject = f"EMERGENCY ALERT from {user_name}"
    plea = message or DEFAULT_SOS_TEXT

    lines = [f"EMERGENCY ALERT from {user_name}!", "", f"Message: {plea}" if message else plea, ""]
    if location_url:
        lines += [f"Current Location: {location_url}", ""]
    if media_url:
        lines += [f"Emergency Recording: {media_url}", ""]
    if nearest_place is not None:
        lines += [f"Nearest safe place: {describe_place(nearest_place)}", ""]
    lines += [
        f"This is an automated SOS message from {APP_NAME} app.",
        "Please contact emergency services if needed:",
        _numbers_text(),
    ]
    text = "\n".join(lines)

    blocks = [
        "<h1>EMERGENCY ALERT</h1>",
        f"<h2>From: {html.escape(user_name)}</h2>",
        f"<p>{html.escape(plea)}</p>",
    ]
    if location_url:
        url = html.escape(location_url, quote=True)
        blocks.append(f'<p><strong>Current Location:</strong> <a href="{url}">{url}</a></p>')
    if media_url:
        url = html.escape(media_url, quote=True)
        blocks.append(f'<p><strong>Emergency Recording:</strong> <a href="{url}">{url}</a></p>')
    if nearest_place is not None:
        blocks.append(
            f"<p><strong>Nearest safe place:</strong> {html.escape(describe_place(nearest_place))}</p>"
        )
    blocks += [
        f"<p><strong>IMMEDIATE ACTION REQUIRED</strong><br>{_numbers_html()}</p>",
        f"<p><small>{html.escape(_sent_footer())}</small></p>",
    ]
    return subject, text, "\n".join(blocks)


def compose_contact_message(
    user_name: str,
    message: str,
    *,
    location_url: str | None = None,
) -> tuple[str, str]:
    """Build the plain-text and HTML bodies of a broadcast/individual message."""
    text = f"Message from {user_name}:\n\n{message}"
    if location_url:
        text += f"\n\nCurrent Location: {location_url}"
    text += f"\n\nSent via {APP_NAME} app"

    blocks = [
        f"<h2>Message from {html.escape(user_name)}</h2>",
        f"<p>{html.escape(message).replace(chr(10), '<br>')}</p>",
    ]
    if location_url:
        url = html.escape(location_url, quote=True)
        blocks.append(f'<p><strong>Current Location:</strong> <a href="{url}">{url}</a></p>')
    blocks += [
        f"<p><strong>Emergency Contacts (India):</strong><br>{_numbers_html()}</p>",
        f"<p><small>{html.escape(_sent_footer())}</small></p>",
    ]
    return text, "\n".join(blocks)


# ---------------------------------------------------------------------------
# Notifier
# ---------------------------------------------------------------------------


class ContactNotifier:
    """Sends SOS alerts and messages to a user's emergency contacts.

    Parameters
    ----------
    contacts:
        Source of the user's contacts and display name.
    email:
        Resend client; ``None`` when email delivery is not configured, in
        which case every email is reported as failed.
    safety:
        Optional safety service used to attach the nearest safe place to
        an SOS alert.
    emergency_sender, message_sender:
        ``From`` addresses for SOS alerts and ordinary messages.
    nearest_place_timeout:
        Seconds to wait for the nearest-place lookup.  On timeout the SOS
        is sent without it.
    """

    __slots__ = (
        "_contacts",
        "_email",
        "_emergency_sender",
        "_incidents",
        "_message_sender",
        "_nearest_place_timeout",
        "_safety",
    )

    def __init__(
        self,
        contacts: ContactBook,
        email: ResendEmailClient | None,
        *,
        safety: SafetyAssessmentService | None = None,
        emergency_sender: str = f"{APP_NAME} Emergency <emergency@womensafe.in>",
        message_sender: str = f"{APP_NAME} <noreply@womensafe.in>",
        nearest_place_timeout: float = DEFAULT_NEAREST_PLACE_TIMEOUT_S,
    ) -> None:
        self._contacts = contacts
        self._email = email
        self._safety = safety
        self._emergency_sender = emergency_sender
        self._message_sender = message_sender
        self._nearest_place_timeout = nearest_place_timeout
        self._incidents: dict[str, dict[str, SOSIncident]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def send_sos(self, request: SOSRequest) -> DispatchResult:
        """Alert every emergency contact and open an SOS incident.

        Raises
        ------
        NoEmergencyContacts
            The user has not registered any contacts.
        """
        contacts = self._contacts.list_contacts(request.user_id)
        if not contacts:
            raise NoEmergencyContacts("No emergency contacts found")

        nearest = None
        if request.include_nearest_place:
            nearest = await self._nearest_place(request.latitude, request.longitude)

        subject, text, body_html = compose_sos(
            self._contacts.display_name(request.user_id),
            message=request.message,
            location_url=maps_link(request.latitude, request.longitude),
            media_url=request.media_url,
            nearest_place=nearest,
        )
        email_results, notifications = await self._dispatch(
            contacts, self._emergency_sender, subject, text, body_html,
        )

        incident = SOSIncident(
            user_id=request.user_id,
            latitude=request.latitude,
            longitude=request.longitude,
        )
        self._incidents.setdefault(request.user_id, {})[incident.id] = incident

        result = DispatchResult(
            message=f"Emergency notifications sent to {len(contacts)} contacts",
            contacts_notified=len(contacts),
            emails_sent=_count_sent(email_results),
            email_results=email_results,
            notifications=notifications,
            incident_id=incident.id,
        )
        logger.info(
            "sos.dispatched",
            user_id=request.user_id,
            incident_id=incident.id,
            contacts=result.contacts_notified,
            emails_sent=result.emails_sent,
            has_location=request.latitude is not None and request.longitude is not None,
        )
        return result

    async def send_broadcast(self, request: BroadcastRequest) -> DispatchResult:
        """Send one message to all contacts, or to the selected subset."""
        contacts = self._contacts.list_contacts(request.user_id)
        if request.contact_ids is not None:
            wanted = set(request.contact_ids)
            contacts = [c for c in contacts if c.id in wanted]
        if not contacts:
            raise NoEmergencyContacts("No contacts selected for broadcast")

        text, body_html = compose_contact_message(
            self._contacts.display_name(request.user_id),
            request.message,
            location_url=maps_link(request.latitude, request.longitude),
        )
        email_results, notifications = await self._dispatch(
            contacts, self._message_sender, request.subject, text, body_html,
        )

        logger.info(
            "messages.broadcast_sent",
            user_id=request.user_id,
            contacts=len(contacts),
            emails_sent=_count_sent(email_results),
        )
        return DispatchResult(
            message=f"Broadcast sent to {len(contacts)} contacts",
            contacts_notified=len(contacts),
            emails_sent=_count_sent(email_results),
            email_results=email_results,
            notifications=notifications,
        )

    async def send_individual(self, request: IndividualMessageRequest) -> DispatchResult:
        """Send a message to a single contact owned by the user.

        Raises
        ------
        ContactNotFound
            The contact does not belong to the user.
        """
        contact = self._contacts.get_contact(request.user_id, request.contact_id)

        text, body_html = compose_contact_message(
            self._contacts.display_name(request.user_id),
            request.message,
            location_url=maps_link(request.latitude, request.longitude),
        )
        email_results, notifications = await self._dispatch(
            [contact], self._message_sender, request.subject, text, body_html,
        )

        logger.info(
            "messages.individual_sent",
            user_id=request.user_id,
            contact_id=contact.id,
            emails_sent=_count_sent(email_results),
        )
        return DispatchResult(
            message=f"Message sent to {contact.name}",
            contacts_notified=1,
            emails_sent=_count_sent(email_results),
            email_results=email_results,
            notifications=notifications,
        )

    def list_incidents(self, user_id: str) -> list[SOSIncident]:
        incidents = list(self._incidents.get(user_id, {}).values())
        incidents.sort(key=lambda i: i.created_at, reverse=True)
        return incidents

    def update_incident(
        self,
        user_id: str,
        incident_id: str,
        status: IncidentStatus,
    ) -> SOSIncident:
        incident = self._incidents.get(user_id, {}).get(incident_id)
        if incident is None:
            raise IncidentNotFound(incident_id)
        updated = incident.model_copy(
            update={"status": status, "updated_at": datetime.now(UTC)}
        )
        self._incidents[user_id][incident_id] = updated
        logger.info(
            "sos.incident_updated",
            user_id=user_id,
            incident_id=incident_id,
            status=status,
        )
        return updated

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _nearest_place(
        self,
        latitude: float | None,
        longitude: float | None,
    ) -> SafePlace | None:
        if self._safety is None:
            return None
        try:
            assessment = await asyncio.wait_for(
                self._safety.assess(latitude, longitude),
                timeout=self._nearest_place_timeout,
            )
        except TimeoutError:
            logger.warning(
                "sos.nearest_place_timed_out",
                timeout_s=self._nearest_place_timeout,
            )
            return None
        return assessment.zone_status.nearest_place

    async def _dispatch(
        self,
        contacts: Sequence[EmergencyContact],
        sender: str,
        subject: str,
        text: str,
        body_html: str,
    ) -> tuple[list[EmailResult], list[NotificationRecord]]:
        """Email every contact that has an address, concurrently."""
        with_email = [(c, c.email) for c in contacts if c.email]
        email_results = list(
            await asyncio.gather(
                *(
                    self._send_one(c, address, sender, subject, text, body_html)
                    for c, address in with_email
                )
            )
        )
        delivered = {
            r.contact_email for r in email_results if r.status == EmailStatus.SENT
        }

        notifications = [
            NotificationRecord(
                contact_name=c.name,
                contact_phone=c.phone,
                contact_email=c.email,
                message=text,
                email_sent=c.email in delivered,
            )
            for c in contacts
        ]
        return email_results, notifications

    async def _send_one(
        self,
        contact: EmergencyContact,
        email_address: str,
        sender: str,
        subject: str,
        text: str,
        body_html: str,
    ) -> EmailResult:
        if self._email is None:
            return EmailResult(
                contact_name=contact.name,
                contact_email=email_address,
                status=EmailStatus.FAILED,
                error="Email delivery is not configured",
            )

        try:
            message_id = await self._email.send(
                sender=sender,
                to=email_address,
                subject=subject,
                text=text,
                html=body_html,
            )
        except EmailDeliveryError as exc:
            logger.warning(
                "notifications.email_failed",
                contact_id=contact.id,
                error=str(exc),
            )
            return EmailResult(
                contact_name=contact.name,
                contact_email=email_address,
                status=EmailStatus.FAILED,
                error=str(exc),
            )

        return EmailResult(
            contact_name=contact.name,
            contact_email=email_address,
            status=EmailStatus.SENT,
            message_id=message_id,
        )


def _count_sent(results: Sequence[EmailResult]) -> int:
    return sum(1 for r in results if r.status == EmailStatus.SENT)
