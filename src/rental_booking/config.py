"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    wati_api_url: str | None = None
    wati_auth_token: str | None = None
    wati_channel_number: str | None = None
    wati_template_name: str = "bookingconfirmation"
    default_country_code: str = "1"
    ride_media_bucket: str = "ride-photos"
    booking_check_timeout_seconds: float = 2.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def missing_messaging_settings(settings: Settings) -> list[str]:
    """Return the names of required WhatsApp settings that are unset."""
    required = {
        "wati_api_url": settings.wati_api_url,
        "wati_auth_token": settings.wati_auth_token,
        "wati_channel_number": settings.wati_channel_number,
    }
    return [name for name, value in required.items() if not (value or "").strip()]
