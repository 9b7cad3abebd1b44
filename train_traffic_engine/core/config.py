"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATUS_SOURCE_URL = "https://damp-garden-70395.herokuapp.com/"


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Unset disables the application id check.
    SKILL_APPLICATION_ID: str | None = Field(default=None)
    STATUS_SOURCE_URL: str = Field(default=DEFAULT_STATUS_SOURCE_URL)
    PAGINATION_SIZE: int = Field(default=3, ge=1)
    TRAIN_TRAFFIC_LOG_LEVEL: str = Field(default="info")
    TRAIN_TRAFFIC_LOG_DIR: Path | None = Field(default=None)


settings = Settings()


__all__ = ["DEFAULT_STATUS_SOURCE_URL", "Settings", "settings"]
