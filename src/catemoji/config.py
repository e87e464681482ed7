"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Caption credentials are optional; without them captions come from the
    static fallback table.
    """

    caption_backend: Literal["anthropic", "openai"] = "anthropic"
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_base_url: str = "https://api.anthropic.com"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    caption_max_tokens: int = 1000
    classifier_delay_seconds: float = 1.5
    camera_device: int = 0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def caption_credentials(settings: Settings) -> str | None:
    """Return the API key for the selected caption backend, if usable."""
    if settings.caption_backend == "openai":
        raw = settings.openai_api_key
    else:
        raw = settings.anthropic_api_key
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
