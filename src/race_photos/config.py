"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    stripe_secret_key: str
    stripe_webhook_secret: str
    stripe_publishable_key: str
    supabase_url: str
    supabase_service_role_key: str
    site_url: str
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    storage_bucket: str = "race-photos"
    currency: str = "usd"
    platform_fee_percent: int = 10
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def base_url(self) -> str:
        """Deployment origin without a trailing slash."""
        return self.site_url.rstrip("/")
