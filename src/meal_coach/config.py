"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "file"
    data_dir: str = "data"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    vapid_public_key: str | None = None
    vapid_private_key: str | None = None
    vapid_subject: str = "mailto:you@example.com"
    timezone: str = "UTC"
    scheduler_enabled: bool = True
    nag_interval_seconds: int = 60
    persist_nag_state: bool = True
    push_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator(
        "supabase_url",
        "supabase_service_key",
        "openai_api_key",
        "vapid_public_key",
        "vapid_private_key",
        mode="before",
    )
    @classmethod
    def _blank_as_unset(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("storage_backend")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        cleaned = value.strip().lower()
        if cleaned not in {"file", "supabase"}:
            raise ValueError(f"Unknown storage backend: {value}")
        return cleaned

    @property
    def push_configured(self) -> bool:
        """Return True when VAPID credentials are available."""
        return bool(self.vapid_public_key and self.vapid_private_key)

    @property
    def vision_configured(self) -> bool:
        """Return True when an OpenAI key is available."""
        return bool(self.openai_api_key)
