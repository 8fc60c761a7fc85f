"""Application configuration."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path(".macro_budget")
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    timezone: str | None = None
    reminder_hour: int = Field(default=22, ge=0, le=23)
    reminder_title: str = "Macros Reminder"
    reminder_icon: str = "/icon-block.svg"
    telegram_bot_token: str | None = None
    telegram_chat_id: int | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_timezone(name: str | None) -> ZoneInfo | None:
    """Return the configured zone, or None to use system local time."""
    if name is None:
        return None
    cleaned = name.strip()
    if not cleaned:
        return None
    return ZoneInfo(cleaned)
