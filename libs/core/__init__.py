"""Core library exposing domain models, settings and exceptions."""

from .settings import Settings, get_settings
from .exceptions import (
    DomainError,
    NotFoundError,
    ValidationError,
    UnsupportedMediaError,
    UntrustedUrlError,
    UploadError,
    StorageError,
)
from .models import (
    MediaKind,
    MediaSource,
    Phase,
    MediaItem,
    Event,
    UploadCounters,
    ConversationState,
)

__all__ = [
    "Settings",
    "get_settings",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "UnsupportedMediaError",
    "UntrustedUrlError",
    "UploadError",
    "StorageError",
    "MediaKind",
    "MediaSource",
    "Phase",
    "MediaItem",
    "Event",
    "UploadCounters",
    "ConversationState",
]
