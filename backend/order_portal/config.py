from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Required provider configuration is missing."""


class Settings(BaseSettings):
    # Email provider: "resend" (REST API) or "gmail" (Gmail API with OAuth user credentials)
    email_provider: str = "resend"

    # Resend
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com"
    email_timeout_seconds: float = 30.0

    # Routing
    to_email: Optional[str] = None  # Production mailbox (e.g. the Zoho Desk intake address)
    from_email: Optional[str] = None  # Verified sender address
    cc_email: Optional[str] = None

    # Intake gating
    order_portal_code: Optional[str] = None  # Shared access code, check skipped when unset
    max_pdf_bytes: int = 8_000_000

    # Gmail API Configuration
    gmail_credentials_json: Optional[str] = None  # Authorized user info (with refresh token)
    gmail_client_id: Optional[str] = None
    gmail_client_secret: Optional[str] = None
    gmail_refresh_token: Optional[str] = None

    # CORS Configuration
    cors_origins: str = "http://localhost:3000,http://localhost:3001,https://*.vercel.app"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env file
        frozen = True

    @property
    def access_code_required(self) -> bool:
        return bool(self.order_portal_code)

    @property
    def cc_addresses(self) -> Optional[List[str]]:
        """CC list for outgoing orders, None when no CC address is configured."""
        return [self.cc_email] if self.cc_email else None

    def missing_provider_settings(self) -> List[str]:
        """Environment variable names the selected provider still needs."""
        missing = []
        provider = self.email_provider.lower()
        if provider == "resend":
            if not self.resend_api_key:
                missing.append("RESEND_API_KEY")
        elif provider == "gmail":
            has_client_tokens = (
                self.gmail_client_id and self.gmail_client_secret and self.gmail_refresh_token
            )
            if not (self.gmail_credentials_json or has_client_tokens):
                missing.append("GMAIL_CREDENTIALS_JSON")
        else:
            missing.append("EMAIL_PROVIDER")
        if not self.to_email:
            missing.append("TO_EMAIL")
        if not self.from_email:
            missing.append("FROM_EMAIL")
        return missing

    def require_provider_config(self) -> None:
        missing = self.missing_provider_settings()
        if missing:
            raise ConfigurationError(f"Missing env var: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    return Settings()
