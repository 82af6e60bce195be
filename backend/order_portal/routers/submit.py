"""
Submit API router - receives the intake form and forwards it to production
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from order_portal.config import Settings, get_settings
from order_portal.dependencies import get_submission_service
from order_portal.schemas.email import ConfigStatusResponse, ErrorResponse, SubmitResponse
from order_portal.schemas.submission import OrderAttachment, OrderForm
from order_portal.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["submit"])

ATTACHMENT_FIELD = "poPdf"


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_order(
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
):
    """
    Validate a production order and email it, with the PO PDF, to production

    Expects multipart/form-data with the order fields, itemsJson and a poPdf file part.
    """
    form_data = await request.form()
    try:
        form = OrderForm.from_form(form_data)

        attachment = None
        upload = form_data.get(ATTACHMENT_FIELD)
        if isinstance(upload, UploadFile):
            # One byte past the ceiling is enough to reject; never buffer more
            content = await upload.read(service.settings.max_pdf_bytes + 1)
            attachment = OrderAttachment(
                filename=upload.filename,
                content_type=upload.content_type,
                content=content,
                declared_size=upload.size,
            )

        logger.info(
            f"Received PO submission: po_number={form.po_number!r} "
            f"salesperson={form.salesperson_email!r} attachment={getattr(upload, 'filename', None)!r}"
        )

        # Provider clients are blocking
        await run_in_threadpool(service.submit, form, attachment)
    finally:
        await form_data.close()

    return SubmitResponse(ok=True)


@router.get("/config/status", response_model=ConfigStatusResponse)
def get_config_status(settings: Settings = Depends(get_settings)):
    """
    Check whether the email provider is configured.
    Reports setting names only, never their values.
    """
    missing = settings.missing_provider_settings()
    return ConfigStatusResponse(
        email_provider=settings.email_provider,
        configured=not missing,
        missing=missing,
        access_code_required=settings.access_code_required,
        cc_configured=bool(settings.cc_email),
        max_pdf_bytes=settings.max_pdf_bytes,
    )
