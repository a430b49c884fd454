"""Pydantic models representing core domain entities."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MediaKind(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class MediaSource(str, Enum):
    TELEGRAM = "telegram"
    MANUAL = "manual"
    DOCUMENT = "document"


class Phase(str, Enum):
    """Conversation phases, in the only order they may be visited."""

    AWAITING_TITLE = "awaiting_title"
    AWAITING_DESCRIPTION = "awaiting_description"
    AWAITING_URLS = "awaiting_urls"


class MediaItem(BaseModel):
    """Single gallery entry.

    Serialised with the field names the frontend expects (``type`` and
    ``file_path``) when dumped with ``by_alias=True``.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: MediaKind = Field(..., alias="type")
    url: str = Field(..., alias="file_path")
    timestamp: datetime = Field(default_factory=utcnow)
    source: MediaSource = MediaSource.TELEGRAM


class Event(BaseModel):
    """An event gallery created from one chat conversation."""

    id: str
    title: str = "Event Gallery"
    description: str = ""
    media: List[MediaItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)


class UploadCounters(BaseModel):
    success: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed


class ConversationState(BaseModel):
    """Per-chat progress through the gallery creation flow."""

    chat_id: int
    event_id: str
    phase: Phase = Phase.AWAITING_TITLE
    # Only present once the chat reached the media collection phase
    counters: Optional[UploadCounters] = None
    updated_at: datetime = Field(default_factory=utcnow)


__all__ = [
    "MediaKind",
    "MediaSource",
    "Phase",
    "MediaItem",
    "Event",
    "UploadCounters",
    "ConversationState",
    "utcnow",
]
