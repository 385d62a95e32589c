"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path("data")
    storage_key: str = Field(default="medicines", pattern=r"^[A-Za-z0-9_.-]+$")
    timezone: str = "UTC"
    dosage_unit: str = "mg"
    time_format: str = "%I:%M %p"
    reminder_title: str = "⏰ Medicine Reminder"
    telegram_bot_token: str | None = None
    telegram_chat_id: int | None = None
    access_token: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
