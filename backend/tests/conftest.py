from __future__ import annotations

from typing import Any, List, Optional

import pytest

from order_portal.config import Settings
from order_portal.schemas.email import EmailAck, EmailRequest
from order_portal.schemas.submission import OrderAttachment, OrderForm

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


def make_settings(**overrides: Any) -> Settings:
    values = {
        "email_provider": "resend",
        "resend_api_key": "re_test_key",
        "to_email": "orders@desk.example.com",
        "from_email": "portal@dbd.example.com",
        "cc_email": None,
        "order_portal_code": None,
        "max_pdf_bytes": 8_000_000,
        "gmail_credentials_json": None,
        "gmail_client_id": None,
        "gmail_client_secret": None,
        "gmail_refresh_token": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class RecordingProvider:
    """Email provider double that keeps every request it was asked to send."""

    def __init__(self, error: Optional[Exception] = None):
        self.requests: List[EmailRequest] = []
        self.error = error

    def send(self, request: EmailRequest) -> EmailAck:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return EmailAck(provider="fake", message_id=f"msg-{len(self.requests)}")


def make_form(**overrides: str) -> OrderForm:
    values = {
        "salesperson_name": "Pat Lee",
        "salesperson_email": "pat@x.com",
        "po_number": "DBD_287",
        "po_name": "Fall Hoodie Run",
        "rush_order": "true",
        "items_json": "[]",
    }
    values.update(overrides)
    return OrderForm(**values)


def make_attachment(content: bytes = PDF_BYTES, filename: Optional[str] = "DBD_287.pdf") -> OrderAttachment:
    return OrderAttachment(filename=filename, content_type="application/pdf", content=content)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()
