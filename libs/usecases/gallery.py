from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List

from libs.core.exceptions import NotFoundError, UploadError
from libs.core.models import MediaItem
from libs.storage import GalleryStore
from libs.uploaders import MediaUploader

logger = logging.getLogger(__name__)


class GetEvent:
    """Read a gallery for the frontend.

    With a non-durable uploader the stored references are turned into fresh
    links on every read.
    """

    def __init__(self, store: GalleryStore, uploader: MediaUploader) -> None:
        self.store = store
        self.uploader = uploader

    async def _resolve(self, item: MediaItem) -> Dict[str, Any]:
        data = item.model_dump(mode="json", by_alias=True)
        try:
            data["file_path"] = await self.uploader.resolve(item.url)
        except UploadError as exc:
            logger.warning("Could not refresh media link: %s", exc)
        return data

    async def __call__(self, event_id: str) -> Dict[str, Any]:
        event = await self.store.get_event(event_id)
        if event is None:
            raise NotFoundError(f"Event {event_id} not found")
        if self.uploader.durable:
            media: List[Dict[str, Any]] = [
                m.model_dump(mode="json", by_alias=True) for m in event.media
            ]
        else:
            media = list(await asyncio.gather(*(self._resolve(m) for m in event.media)))
        return {
            "eventId": event.id,
            "title": event.title,
            "description": event.description or "",
            "media": media,
        }


__all__ = ["GetEvent"]
