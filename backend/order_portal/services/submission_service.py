"""
Submission Service - validates a production order and emails it to production

One request in, at most one email out. Nothing is stored and nothing is
retried; every outcome is final for the request.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from order_portal.config import Settings
from order_portal.schemas.email import EmailAck, EmailAttachment, EmailRequest
from order_portal.schemas.submission import OrderAttachment, OrderForm, Submission
from order_portal.services.email_provider import EmailProvider
from order_portal.services.line_items import decode_line_items
from order_portal.services.order_email_service import OrderEmailService

logger = logging.getLogger(__name__)


class SubmissionRejected(Exception):
    """A submission failed validation. Carries the HTTP status to answer with."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldsError(SubmissionRejected):
    status_code = 400


class AccessDeniedError(SubmissionRejected):
    status_code = 403


class AttachmentTooLargeError(SubmissionRejected):
    status_code = 413


def megabytes(num_bytes: int) -> int:
    """Whole megabytes (10^6 bytes), rounded half up"""
    return int((Decimal(num_bytes) / Decimal(1_000_000)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class SubmissionService:
    """Validate, render and dispatch production orders"""

    def __init__(
        self,
        settings: Settings,
        provider: Optional[EmailProvider] = None,
        email_service: Optional[OrderEmailService] = None,
        provider_factory: Optional[Callable[[Settings], EmailProvider]] = None,
    ):
        """Pass `provider`, or `provider_factory` to build it only once an order passes validation."""
        if provider is None and provider_factory is None:
            raise ValueError("SubmissionService needs a provider or a provider_factory")
        self.settings = settings
        self._provider = provider
        self.provider_factory = provider_factory
        self.email_service = email_service or OrderEmailService()

    @property
    def provider(self) -> EmailProvider:
        if self._provider is None:
            self._provider = self.provider_factory(self.settings)
        return self._provider

    def validate(self, form: OrderForm, attachment: Optional[OrderAttachment]) -> Submission:
        """
        Check required fields, access code and attachment, in that order.

        Raises:
            SubmissionRejected subclass for the first failed check
        """
        if not form.salesperson_name or not form.salesperson_email:
            raise MissingFieldsError("Missing salesperson name/email.")

        portal_code = self.settings.order_portal_code
        if portal_code and form.access_code != portal_code:
            logger.warning(f"Rejected submission from {form.salesperson_email}: invalid access code")
            raise AccessDeniedError("Invalid access code.")

        if not form.po_number or not form.po_name:
            raise MissingFieldsError("Missing PO number or PO name.")

        if attachment is None:
            raise MissingFieldsError("PO PDF is required.")

        max_bytes = self.settings.max_pdf_bytes
        if attachment.size > max_bytes:
            logger.warning(
                f"Rejected PO {form.po_number}: attachment is {attachment.size} bytes, limit {max_bytes}"
            )
            raise AttachmentTooLargeError(f"PDF is too large. Max is {megabytes(max_bytes)}MB.")

        decoded = decode_line_items(form.items_json)
        if not decoded.ok:
            # Lax on purpose: the order still goes out, just without a line item table
            logger.warning(f"PO {form.po_number}: {decoded.error}; sending with no line items")

        return Submission(form=form, line_items=decoded.items, attachment=attachment)

    def build_email(self, submission: Submission) -> EmailRequest:
        form = submission.form
        return EmailRequest(
            from_address=self.settings.from_email,
            to_addresses=[self.settings.to_email],
            cc_addresses=self.settings.cc_addresses,
            reply_to=form.salesperson_email,
            subject=self.email_service.build_subject(submission),
            body_html=self.email_service.render_html(submission),
            attachments=[
                EmailAttachment(
                    filename=self.email_service.attachment_filename(submission),
                    content=submission.attachment.content,
                    content_type=submission.attachment.content_type or "application/pdf",
                )
            ],
        )

    def submit(self, form: OrderForm, attachment: Optional[OrderAttachment]) -> EmailAck:
        """Validate the order and send exactly one email for it"""
        submission = self.validate(form, attachment)
        request = self.build_email(submission)

        ack = self.provider.send(request)
        logger.info(
            f"Sent PO {form.po_number} ({len(submission.line_items)} line items, "
            f"{attachment.size} byte attachment) to production: message_id={ack.message_id}"
        )
        return ack
