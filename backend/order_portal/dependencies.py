from fastapi import Depends

from order_portal.config import Settings, get_settings
from order_portal.services.email_provider import get_email_provider
from order_portal.services.submission_service import SubmissionService


def get_submission_service(settings: Settings = Depends(get_settings)) -> SubmissionService:
    """Build the submission pipeline for a request. Raises ConfigurationError when the provider is not set up.

    The email provider is only created (once per process) when an order passes validation.
    """
    settings.require_provider_config()
    return SubmissionService(settings=settings, provider_factory=get_email_provider)
