"""Tests for the Resend email client using ``httpx.MockTransport``."""

from __future__ import annotations

import json

import httpx
import pytest

from src.services.email import EmailDeliveryError, ResendEmailClient


@pytest.mark.asyncio
async def test_send_posts_payload_and_returns_id() -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "msg_123"})

    client = ResendEmailClient("re_test", transport=httpx.MockTransport(handler))
    message_id = await client.send(
        sender="WomenSafe India <noreply@womensafe.in>",
        to="asha@example.com",
        subject="Hello",
        text="plain",
        html="<p>html</p>",
    )
    await client.close()

    assert message_id == "msg_123"
    assert captured["url"] == "https://api.resend.com/emails"
    assert captured["auth"] == "Bearer re_test"
    assert captured["body"]["to"] == ["asha@example.com"]
    assert captured["body"]["from"] == "WomenSafe India <noreply@womensafe.in>"
    assert captured["body"]["subject"] == "Hello"


@pytest.mark.asyncio
async def test_rejection_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "Invalid `to` field"})

    client = ResendEmailClient("re_test", transport=httpx.MockTransport(handler))
    with pytest.raises(EmailDeliveryError, match="422"):
        await client.send(sender="a@b.c", to="x", subject="s", text="t", html="h")
    await client.close()


@pytest.mark.asyncio
async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ResendEmailClient("re_test", transport=httpx.MockTransport(handler))
    with pytest.raises(EmailDeliveryError):
        await client.send(sender="a@b.c", to="x@y.z", subject="s", text="t", html="h")
    await client.close()
