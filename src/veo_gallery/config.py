"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    veo_model: str = "veo-2.0-generate-001"
    aspect_ratio: str = "16:9"
    number_of_videos: int = 1
    poll_interval_seconds: float = 10.0
    max_poll_attempts: int | None = None
    poll_timeout_seconds: float | None = None
    preferences_path: Path = Path(".veo_gallery/preferences.json")
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
