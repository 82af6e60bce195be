"""
Email schemas for the provider boundary
"""
from typing import List, Optional
from pydantic import BaseModel


class EmailAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/pdf"


class EmailRequest(BaseModel):
    """One outbound message, provider-agnostic"""
    from_address: str
    to_addresses: List[str]
    cc_addresses: Optional[List[str]] = None  # Omitted from the send call when None
    reply_to: Optional[str] = None
    subject: str
    body_html: str
    body_text: Optional[str] = None
    attachments: List[EmailAttachment] = []


class EmailAck(BaseModel):
    """Provider acknowledgement after a message was accepted"""
    provider: str
    message_id: Optional[str] = None
    thread_id: Optional[str] = None


class SubmitResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str


class ConfigStatusResponse(BaseModel):
    email_provider: str
    configured: bool
    missing: List[str]
    access_code_required: bool
    cc_configured: bool
    max_pdf_bytes: int
