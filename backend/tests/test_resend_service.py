from __future__ import annotations

import base64
import json

import httpx
import pytest

from conftest import PDF_BYTES
from order_portal.schemas.email import EmailAttachment, EmailRequest
from order_portal.services.email_provider import EmailProviderError
from order_portal.services.resend_service import ResendService


def make_request(**overrides) -> EmailRequest:
    values = dict(
        from_address="portal@dbd.example.com",
        to_addresses=["orders@desk.example.com"],
        reply_to="pat@x.com",
        subject="[DBD PO] DBD_287 — Fall Hoodie Run",
        body_html="<p>order</p>",
        attachments=[EmailAttachment(filename="DBD_287.pdf", content=PDF_BYTES)],
    )
    values.update(overrides)
    return EmailRequest(**values)


def test_posts_message_to_resend():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"})

    service = ResendService(api_key="re_123", transport=httpx.MockTransport(handler))
    ack = service.send(make_request())

    assert ack.provider == "resend"
    assert ack.message_id == "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.resend.com/emails"
    assert request.headers["Authorization"] == "Bearer re_123"

    payload = json.loads(request.content)
    assert payload["from"] == "portal@dbd.example.com"
    assert payload["to"] == ["orders@desk.example.com"]
    assert payload["reply_to"] == "pat@x.com"
    assert payload["subject"] == "[DBD PO] DBD_287 — Fall Hoodie Run"
    assert payload["html"] == "<p>order</p>"
    assert "cc" not in payload
    assert payload["attachments"] == [
        {"filename": "DBD_287.pdf", "content": base64.b64encode(PDF_BYTES).decode("ascii")}
    ]


def test_cc_included_when_present():
    payloads = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "abc"})

    service = ResendService(api_key="re_123", transport=httpx.MockTransport(handler))
    service.send(make_request(cc_addresses=["lead@dbd.example.com"]))

    assert payloads[0]["cc"] == ["lead@dbd.example.com"]


def test_provider_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403,
            json={"statusCode": 403, "name": "validation_error", "message": "The dbd.example.com domain is not verified."},
        )

    service = ResendService(api_key="re_123", transport=httpx.MockTransport(handler))

    with pytest.raises(EmailProviderError, match="domain is not verified"):
        service.send(make_request())


def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    service = ResendService(api_key="re_123", transport=httpx.MockTransport(handler))

    with pytest.raises(EmailProviderError, match="HTTP 502"):
        service.send(make_request())


def test_transport_failure_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = ResendService(api_key="re_123", transport=httpx.MockTransport(handler))

    with pytest.raises(EmailProviderError, match="Failed to reach email provider"):
        service.send(make_request())
