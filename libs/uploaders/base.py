from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from libs.core.models import MediaKind
from libs.tg.files import FileSource


@dataclass
class PendingUpload:
    """A chat attachment waiting to be stored; bytes are fetched on demand."""

    file_id: str
    kind: MediaKind
    files: FileSource
    mime_type: Optional[str] = None
    file_name: Optional[str] = None

    async def read(self) -> bytes:
        return await self.files.download(self.file_id)

    @property
    def suggested_name(self) -> str:
        if self.file_name:
            return self.file_name
        return f"{self.file_id}.{'mp4' if self.kind is MediaKind.VIDEO else 'jpg'}"


class MediaUploader(ABC):
    """Turns chat attachments into links the gallery frontend can fetch.

    Every failure is reported as :class:`~libs.core.exceptions.UploadError`.
    """

    name: str = "base"
    # False when stored links expire and must be resolved again on read
    durable: bool = True

    @abstractmethod
    async def store(self, upload: PendingUpload) -> str:
        """Persist the attachment and return its stored reference."""

    async def accept(self, url: str) -> str:
        """Take over an already hosted URL (validated by the caller)."""
        return url

    async def resolve(self, stored: str) -> str:
        """Turn a stored reference into a fetchable URL."""
        return stored

    async def aclose(self) -> None:
        """Release HTTP clients held by the uploader."""


__all__ = ["PendingUpload", "MediaUploader"]
