"""
Gmail API Service for sending emails

Alternative to Resend for workspaces that send production orders from a
Google account. Uses OAuth2 user credentials (refresh token) from settings.
"""
import base64
import json
import logging
import re
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from order_portal.config import Settings
from order_portal.schemas.email import EmailAck, EmailRequest
from order_portal.services.email_provider import EmailProviderError

logger = logging.getLogger(__name__)

# Gmail API scopes
SCOPES = ['https://www.googleapis.com/auth/gmail.send']
TOKEN_URI = 'https://oauth2.googleapis.com/token'


class GmailService:
    """Service for sending emails via Gmail API"""

    def __init__(self, settings: Settings, service: Optional[Any] = None):
        """Initialize Gmail API client. `service` replaces the API resource (tests)."""
        self.settings = settings
        self.creds = None
        self.service = service
        self.init_error = None

        if self.service is not None:
            return

        self.creds = self._load_credentials()
        if self.creds:
            try:
                self.service = build('gmail', 'v1', credentials=self.creds, cache_discovery=False)
                logger.info("Gmail service initialized successfully")
            except Exception as e:
                self.init_error = f"Failed to build Gmail service: {e}"
                logger.error(self.init_error)
                self.service = None
        else:
            logger.warning("Gmail credentials could not be loaded - email sending will be disabled")

    def _load_credentials(self) -> Optional[Credentials]:
        """Load Gmail API credentials from settings"""
        if self.settings.gmail_credentials_json:
            try:
                creds_data = json.loads(self.settings.gmail_credentials_json)
                return Credentials.from_authorized_user_info(creds_data, SCOPES)
            except Exception as e:
                self.init_error = f"Failed to load credentials from GMAIL_CREDENTIALS_JSON: {e}"
                logger.error(self.init_error)

        client_id = self.settings.gmail_client_id
        client_secret = self.settings.gmail_client_secret
        refresh_token = self.settings.gmail_refresh_token

        if client_id and client_secret and refresh_token:
            # No token yet; the API client refreshes it on the first send
            return Credentials(
                token=None,
                refresh_token=refresh_token,
                token_uri=TOKEN_URI,
                client_id=client_id,
                client_secret=client_secret,
                scopes=SCOPES,
            )

        logger.warning("No Gmail credentials found - email sending disabled")
        return None

    def build_message(self, request: EmailRequest) -> MIMEMultipart:
        message = MIMEMultipart('mixed')
        message['To'] = ', '.join(request.to_addresses)
        message['From'] = request.from_address
        message['Subject'] = request.subject

        if request.cc_addresses:
            message['Cc'] = ', '.join(request.cc_addresses)
        if request.reply_to:
            message['Reply-To'] = request.reply_to

        body = MIMEMultipart('alternative')
        # Generate plain text from HTML if not provided
        plain_text = request.body_text or re.sub(r'<[^>]+>', '', request.body_html)
        body.attach(MIMEText(plain_text, 'plain'))
        body.attach(MIMEText(request.body_html, 'html'))
        message.attach(body)

        for attachment in request.attachments:
            subtype = attachment.content_type.split('/', 1)[-1] or 'octet-stream'
            part = MIMEApplication(attachment.content, _subtype=subtype)
            part.add_header('Content-Disposition', 'attachment', filename=attachment.filename)
            message.attach(part)

        return message

    def send(self, request: EmailRequest) -> EmailAck:
        """
        Send email via Gmail API

        Raises:
            EmailProviderError if sending fails
        """
        if not self.service:
            error_detail = self.init_error or "Gmail service not initialized - check credentials"
            raise EmailProviderError(f"Gmail service not initialized: {error_detail}")

        raw_message = base64.urlsafe_b64encode(self.build_message(request).as_bytes()).decode('utf-8')

        try:
            send_message = self.service.users().messages().send(
                userId='me',
                body={'raw': raw_message}
            ).execute()
        except HttpError as error:
            logger.error(f'Gmail API error: {error}')
            raise EmailProviderError(f"Failed to send email via Gmail API: {error}")
        except GoogleAuthError as error:
            # Expired or revoked refresh token surfaces here, on first use
            logger.error(f"Gmail credentials rejected: {error}")
            if "invalid_grant" in str(error).lower():
                logger.error("INVALID_GRANT error - The refresh token has expired or been revoked")
            raise EmailProviderError(f"Gmail credentials rejected: {error}")

        logger.info(f"Email sent successfully via Gmail: message_id={send_message['id']}")

        return EmailAck(
            provider='gmail',
            message_id=send_message['id'],
            thread_id=send_message.get('threadId'),
        )
