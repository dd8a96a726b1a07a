"""Transactional email over the Resend HTTP API.

API documentation: https://resend.com/docs/api-reference/emails/send-email

One request per recipient; there is no retry or queueing.  A failed send
is reported back to the caller, which records it per contact.
"""

from __future__ import annotations

import httpx
import structlog

logger = structlog.get_logger(__name__)


class EmailDeliveryError(Exception):
    """The email provider rejected the message or could not be reached."""


class ResendEmailClient:
    """Async client for ``POST /emails``.

    Parameters
    ----------
    api_key:
        Resend API key.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport, used to inject a mock in tests.
    """

    BASE_URL = "https://api.resend.com"

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def send(
        self,
        *,
        sender: str,
        to: str,
        subject: str,
        text: str,
        html: str,
    ) -> str | None:
        """Send one email and return the provider's message id."""
        payload = {
            "from": sender,
            "to": [to],
            "subject": subject,
            "text": text,
            "html": html,
        }
        try:
            response = await self._client.post("/emails", json=payload)
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Email request failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            logger.warning(
                "email.rejected",
                status=response.status_code,
                detail=detail,
            )
            raise EmailDeliveryError(f"Resend returned {response.status_code}: {detail}")

        message_id = response.json().get("id")
        logger.info("email.sent", message_id=message_id)
        return message_id
