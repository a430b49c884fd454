from __future__ import annotations

import logging

from telegram import Bot

logger = logging.getLogger(__name__)


class BotGateway:
    """Shared wrapper that initialises the bot lazily before the first call."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot
        self._ready = False

    async def _ensure_ready(self) -> Bot:
        if not self._ready:
            # no-op when an Application already initialised this bot
            await self.bot.initialize()
            self._ready = True
        return self.bot

    async def shutdown(self) -> None:
        if self._ready:
            await self.bot.shutdown()
            self._ready = False


__all__ = ["BotGateway"]
