"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_database_url_from_env() -> str:
    """Build a Postgres URI from component env vars if DATABASE_URL is not set.

    Keeps a single source of truth for the DB name via .env variables
    (POSTGRES_USER/PASSWORD/HOST/PORT/DB). If DATABASE_URL is provided, it
    will override this default.
    """
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    host = os.getenv("POSTGRES_HOST", "postgres")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "event_gallery")
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{db}"


class Settings(BaseSettings):
    """Runtime settings for the application."""

    telegram_bot_token: str = Field(default="")
    telegram_webhook_secret: str = Field(default="")
    # Base URL of this service (used by the media proxy links)
    public_url: str = Field(default="")
    # Gallery frontend; the share link is built as <frontend_url>?event=...
    frontend_url: str = Field(default="")

    storage_backend: Literal["memory", "sql"] = Field(default="memory")
    database_url: str = Field(default_factory=_default_database_url_from_env)

    uploader_backend: Literal["cloudinary", "gdrive", "telegram", "proxy"] = Field(
        default="telegram"
    )
    upload_timeout: float = Field(default=60.0)
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")
    cloudinary_folder: str = Field(default="event-media")
    gdrive_access_token: str = Field(default="")
    gdrive_folder_id: str = Field(default="")

    # Conversation policies
    trusted_url_hosts: List[str] = Field(default_factory=lambda: ["cloudinary.com"])
    progress_every: int = Field(default=5, ge=1)
    failure_notice: Literal["aggregate", "per_item"] = Field(default="aggregate")
    out_of_phase: Literal["ignore", "reject"] = Field(default="ignore")
    default_event_title: str = Field(default="Event Gallery")

    log_level: str = Field(default="INFO")
    service_name: str = Field(default="event-gallery")
    environment: str = Field(default="development")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        # Hosting platforms inject plenty of unrelated variables
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return application settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
