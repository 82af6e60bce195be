"""
Email provider boundary

The submission pipeline only needs `send(EmailRequest) -> EmailAck`. Concrete
providers raise EmailProviderError when a message is not accepted.
"""
from functools import lru_cache
from typing import Protocol

from order_portal.config import ConfigurationError, Settings
from order_portal.schemas.email import EmailAck, EmailRequest


class EmailProviderError(Exception):
    """The provider rejected the message or could not be reached.

    The message text is the provider's (or its client library's) own and is
    safe to show to the submitter.
    """


class EmailProvider(Protocol):
    def send(self, request: EmailRequest) -> EmailAck:
        ...


def build_email_provider(settings: Settings) -> EmailProvider:
    """Create the provider selected by EMAIL_PROVIDER. Settings must already be validated."""
    provider = settings.email_provider.lower()
    if provider == "resend":
        from order_portal.services.resend_service import ResendService
        return ResendService(
            api_key=settings.resend_api_key,
            api_url=settings.resend_api_url,
            timeout=settings.email_timeout_seconds,
        )
    if provider == "gmail":
        from order_portal.services.gmail_service import GmailService
        return GmailService(settings)
    raise ConfigurationError(f"Unsupported EMAIL_PROVIDER: {settings.email_provider}")


@lru_cache
def get_email_provider(settings: Settings) -> EmailProvider:
    """Process-wide provider for the given (frozen) settings, built on first use."""
    return build_email_provider(settings)
