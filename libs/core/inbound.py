"""Platform-neutral view of an inbound chat message and its attachment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class PhotoCandidate:
    """Inline photo; ``file_id`` refers to the largest size Telegram offers."""

    file_id: str


@dataclass(frozen=True)
class VideoCandidate:
    file_id: str
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class DocumentCandidate:
    """Generic file; its kind is decided from the MIME type or file name."""

    file_id: str
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


@dataclass(frozen=True)
class UrlCandidate:
    url: str


MediaCandidate = Union[PhotoCandidate, VideoCandidate, DocumentCandidate, UrlCandidate]


@dataclass(frozen=True)
class InboundMessage:
    chat_id: int
    text: str = ""
    language_code: Optional[str] = None
    attachment: Optional[MediaCandidate] = None

    @property
    def command(self) -> Optional[str]:
        """Bot command without the slash or ``@botname`` suffix."""
        if not self.text.startswith("/"):
            return None
        head = self.text.split(maxsplit=1)[0][1:]
        return head.split("@", 1)[0].lower() or None


__all__ = [
    "PhotoCandidate",
    "VideoCandidate",
    "DocumentCandidate",
    "UrlCandidate",
    "MediaCandidate",
    "InboundMessage",
]
