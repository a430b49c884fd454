from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from telegram.error import TelegramError

from .gateway import BotGateway

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Fire-and-forget replies to a chat."""

    @abstractmethod
    async def send(self, chat_id: int, text: str) -> bool:
        """Send ``text``; return ``False`` if delivery failed."""


class TelegramNotifier(BotGateway, Notifier):
    async def send(self, chat_id: int, text: str) -> bool:
        try:
            bot = await self._ensure_ready()
            await bot.send_message(chat_id, text)
        except TelegramError as exc:
            logger.warning(
                "Reply not delivered: %s", exc, extra={"chat_id": chat_id}
            )
            return False
        return True


__all__ = ["Notifier", "TelegramNotifier"]
