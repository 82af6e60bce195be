"""
Intake form controller

Holds the editable state of one production order (header fields, line item
rows and the selected PO PDF) and posts it to the portal's /api/submit
endpoint as multipart form data.
"""
import json
import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

import httpx

from order_portal.schemas.submission import LineItem, OrderAttachment, OrderForm

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in your name, email, PO number, and PO name."
MISSING_PDF_MESSAGE = "Please attach the PO PDF."
SUCCESS_MESSAGE = "Sent to production (Zoho Desk email)."


@dataclass(frozen=True)
class SubmitResult:
    ok: bool
    message: str


def _resolve_field(model: type, key: str) -> str:
    """Accept either the Python field name or the wire name (productNumber)"""
    if key in model.model_fields:
        return key
    for name, field in model.model_fields.items():
        if field.alias == key:
            return name
    raise KeyError(key)


def parse_units(value: str) -> float:
    """Numeric part of a free-text quantity; anything unparsable counts as 0"""
    digits = re.sub(r"[^0-9.]", "", value or "")
    if not digits:
        return 0.0
    try:
        return float(digits)
    except ValueError:
        return 0.0


class IntakeForm:
    """Client-side state for one production order"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

        self.form = OrderForm()
        self.items: List[LineItem] = [LineItem(), LineItem()]
        self.attachment: Optional[OrderAttachment] = None

    # Header fields

    def set_field(self, key: str, value: str) -> None:
        name = _resolve_field(OrderForm, key)
        if name == "items_json":
            raise KeyError(key)
        self.form = self.form.model_copy(update={name: value})

    def set_rush(self, rush: bool) -> None:
        self.form = self.form.model_copy(update={"rush_order": "true" if rush else "false"})

    def attach_file(self, path: Union[str, Path]) -> None:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/pdf"
        self.attachment = OrderAttachment(
            filename=path.name,
            content_type=content_type,
            content=path.read_bytes(),
        )

    # Line items

    def add_row(self) -> None:
        self.items = self.items + [LineItem()]

    def remove_row(self, index: int) -> None:
        """Remove one row; the last remaining row is always kept."""
        if len(self.items) <= 1:
            return
        self.items = [item for i, item in enumerate(self.items) if i != index]

    def update_field(self, index: int, field_key: str, value: str) -> None:
        """Replace one field of one row. Rows are copied, never edited in place."""
        name = _resolve_field(LineItem, field_key)
        updated = self.items[index].model_copy(update={name: value})
        self.items = self.items[:index] + [updated] + self.items[index + 1:]

    def compute_total_units(self) -> float:
        return sum(parse_units(item.total) for item in self.items)

    # Submission

    def validation_error(self) -> Optional[str]:
        form = self.form
        required = [form.salesperson_name, form.salesperson_email, form.po_number, form.po_name]
        if not all(value.strip() for value in required):
            return REQUIRED_FIELDS_MESSAGE
        if self.attachment is None:
            return MISSING_PDF_MESSAGE
        return None

    def to_form_data(self) -> Dict[str, str]:
        data = self.form.model_dump(by_alias=True)
        data["itemsJson"] = json.dumps([item.model_dump(by_alias=True) for item in self.items])
        return data

    def submit(self) -> SubmitResult:
        """
        Post the order to the portal.

        Local validation failures never reach the network. On success only the
        notes are cleared so a corrected order can be resent quickly.
        """
        error = self.validation_error()
        if error:
            return SubmitResult(ok=False, message=error)

        attachment = self.attachment
        files = {
            "poPdf": (
                attachment.filename or f"{self.form.po_number}.pdf",
                attachment.content,
                attachment.content_type or "application/pdf",
            )
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(f"{self.base_url}/api/submit", data=self.to_form_data(), files=files)
        except httpx.HTTPError as e:
            logger.error(f"Order submission failed: {e}")
            return SubmitResult(ok=False, message=str(e) or "Something went wrong.")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            return SubmitResult(ok=False, message=error or "Request failed")

        self.form = self.form.model_copy(update={"notes": ""})
        return SubmitResult(ok=True, message=SUCCESS_MESSAGE)
