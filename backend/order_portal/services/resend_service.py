"""
Resend Service for sending emails

Talks to the Resend REST API directly with httpx.
"""
import base64
import logging
from typing import Any, Dict, Optional

import httpx

from order_portal.schemas.email import EmailAck, EmailRequest
from order_portal.services.email_provider import EmailProviderError

logger = logging.getLogger(__name__)


class ResendService:
    """Service for sending emails via the Resend API"""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _build_payload(self, request: EmailRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": request.from_address,
            "to": request.to_addresses,
            "subject": request.subject,
            "html": request.body_html,
        }
        if request.cc_addresses:
            payload["cc"] = request.cc_addresses
        if request.reply_to:
            payload["reply_to"] = request.reply_to
        if request.body_text:
            payload["text"] = request.body_text
        if request.attachments:
            payload["attachments"] = [
                {
                    "filename": attachment.filename,
                    "content": base64.b64encode(attachment.content).decode("ascii"),
                }
                for attachment in request.attachments
            ]
        return payload

    def send(self, request: EmailRequest) -> EmailAck:
        """
        Send email via Resend

        Returns:
            EmailAck with the Resend message id

        Raises:
            EmailProviderError if Resend rejects the message or is unreachable
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{self.api_url}/emails",
                    json=self._build_payload(request),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed: {e}")
            raise EmailProviderError(f"Failed to reach email provider: {e}")

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(f"Resend API error {response.status_code}: {message}")
            raise EmailProviderError(message)

        data = response.json() if response.content else {}
        message_id = data.get("id")
        logger.info(f"Email sent successfully via Resend: message_id={message_id}")
        return EmailAck(provider="resend", message_id=message_id)

    def _error_message(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"Email provider returned HTTP {response.status_code}"
