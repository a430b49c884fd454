from __future__ import annotations

from libs.core.exceptions import NotFoundError, UploadError
from libs.tg.files import FileSource

from .base import MediaUploader, PendingUpload

REF_PREFIX = "tg-file:"


class TelegramLinkUploader(MediaUploader):
    """Keeps files on Telegram's CDN.

    CDN links expire, so only a ``tg-file:<file_id>`` reference is stored and
    it is turned into a fresh link every time the gallery is read.
    """

    name = "telegram"
    durable = False

    def __init__(self, files: FileSource) -> None:
        self.files = files

    async def store(self, upload: PendingUpload) -> str:
        return f"{REF_PREFIX}{upload.file_id}"

    async def resolve(self, stored: str) -> str:
        if not stored.startswith(REF_PREFIX):
            # manual links are stored as-is
            return stored
        file_id = stored[len(REF_PREFIX):]
        try:
            return await self.files.get_file_link(file_id)
        except NotFoundError as exc:
            raise UploadError(f"Cannot resolve {stored}: {exc}") from exc


__all__ = ["TelegramLinkUploader", "REF_PREFIX"]
