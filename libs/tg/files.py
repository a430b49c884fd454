from __future__ import annotations

from abc import ABC, abstractmethod

from telegram.error import BadRequest, TelegramError

from libs.core.exceptions import NotFoundError, UploadError

from .gateway import BotGateway


class FileSource(ABC):
    """Access to files users attached in the chat."""

    @abstractmethod
    async def get_file_link(self, file_id: str) -> str:
        """Return a currently valid download URL for ``file_id``."""

    @abstractmethod
    async def download(self, file_id: str) -> bytes:
        """Fetch the file contents."""


class TelegramFiles(BotGateway, FileSource):
    """Resolve and download files through the Bot API.

    Links returned by ``getFile`` stay valid for about an hour only.
    """

    async def _get_file(self, file_id: str):
        try:
            bot = await self._ensure_ready()
            return await bot.get_file(file_id)
        except BadRequest as exc:
            raise NotFoundError(f"Telegram file {file_id} not found: {exc}") from exc
        except TelegramError as exc:
            raise UploadError(f"getFile failed for {file_id}: {exc}") from exc

    async def get_file_link(self, file_id: str) -> str:
        tg_file = await self._get_file(file_id)
        if not tg_file.file_path:
            raise UploadError(f"Telegram returned no path for {file_id}")
        return tg_file.file_path

    async def download(self, file_id: str) -> bytes:
        tg_file = await self._get_file(file_id)
        try:
            return bytes(await tg_file.download_as_bytearray())
        except TelegramError as exc:
            raise UploadError(f"Download failed for {file_id}: {exc}") from exc


__all__ = ["FileSource", "TelegramFiles"]
