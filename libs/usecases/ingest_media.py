from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from libs.core.exceptions import DomainError, StorageError
from libs.core.inbound import (
    DocumentCandidate,
    MediaCandidate,
    PhotoCandidate,
    UrlCandidate,
    VideoCandidate,
)
from libs.core.models import (
    ConversationState,
    MediaItem,
    MediaKind,
    MediaSource,
    UploadCounters,
)
from libs.storage import GalleryStore
from libs.tg.files import FileSource
from libs.uploaders import MediaUploader, PendingUpload

from .classify import kind_from_file, kind_from_url

logger = logging.getLogger(__name__)


@dataclass
class IngestOutcome:
    counters: UploadCounters
    item: Optional[MediaItem] = None
    error: Optional[str] = None
    # True when this item completed a batch and a summary should be sent
    progress_due: bool = False

    @property
    def accepted(self) -> bool:
        return self.item is not None


class MediaIngestor:
    """Classify one candidate, store it and count the result.

    Failures are counted and swallowed; nothing is retried.
    """

    def __init__(
        self,
        store: GalleryStore,
        uploader: MediaUploader,
        files: FileSource,
        *,
        trusted_hosts: Iterable[str] = ("cloudinary.com",),
        progress_every: int = 5,
    ) -> None:
        self.store = store
        self.uploader = uploader
        self.files = files
        self.trusted_hosts = tuple(trusted_hosts)
        self.progress_every = progress_every

    async def _store_attachment(
        self, file_id: str, kind: MediaKind, mime_type: Optional[str], file_name: Optional[str] = None
    ) -> str:
        upload = PendingUpload(
            file_id=file_id,
            kind=kind,
            files=self.files,
            mime_type=mime_type,
            file_name=file_name,
        )
        return await self.uploader.store(upload)

    async def _resolve(self, candidate: MediaCandidate) -> Tuple[MediaKind, str, MediaSource]:
        if isinstance(candidate, UrlCandidate):
            kind = kind_from_url(candidate.url, self.trusted_hosts)
            return kind, await self.uploader.accept(candidate.url.strip()), MediaSource.MANUAL
        if isinstance(candidate, DocumentCandidate):
            kind = kind_from_file(candidate.mime_type, candidate.file_name)
            url = await self._store_attachment(
                candidate.file_id, kind, candidate.mime_type, candidate.file_name
            )
            return kind, url, MediaSource.DOCUMENT
        if isinstance(candidate, PhotoCandidate):
            url = await self._store_attachment(candidate.file_id, MediaKind.PHOTO, "image/jpeg")
            return MediaKind.PHOTO, url, MediaSource.TELEGRAM
        if isinstance(candidate, VideoCandidate):
            url = await self._store_attachment(
                candidate.file_id, MediaKind.VIDEO, candidate.mime_type
            )
            return MediaKind.VIDEO, url, MediaSource.TELEGRAM
        raise TypeError(f"Unknown media candidate {candidate!r}")

    def _is_progress_due(self, counters: UploadCounters) -> bool:
        return counters.total > 0 and counters.total % self.progress_every == 0

    async def _count_failure(self, state: ConversationState, reason: str) -> IngestOutcome:
        counters = await self.store.increment_counter(state.chat_id, "failed")
        counters = counters or UploadCounters()
        return IngestOutcome(
            counters=counters,
            error=reason,
            progress_due=self._is_progress_due(counters),
        )

    async def __call__(self, state: ConversationState, candidate: MediaCandidate) -> IngestOutcome:
        log_extra = {"chat_id": state.chat_id, "event_id": state.event_id}
        try:
            kind, url, source = await self._resolve(candidate)
        except StorageError:
            raise
        except DomainError as exc:
            logger.warning("Media item rejected: %s", exc, extra=log_extra)
            return await self._count_failure(state, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while storing media item", extra=log_extra)
            return await self._count_failure(state, f"{type(exc).__name__}: {exc}")

        item = MediaItem(kind=kind, url=url, source=source)
        await self.store.append_media(state.event_id, item)
        counters = await self.store.increment_counter(state.chat_id, "success")
        counters = counters or UploadCounters()
        logger.info(
            "Media item added",
            extra={**log_extra, "kind": kind.value, "source": source.value},
        )
        return IngestOutcome(
            counters=counters,
            item=item,
            progress_due=self._is_progress_due(counters),
        )


__all__ = ["IngestOutcome", "MediaIngestor"]
