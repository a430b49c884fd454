"""Polling entry point for local development.

Production receives updates on the API webhook; this runner feeds the same
dispatcher from ``getUpdates`` so the bot can be tried without a public URL.
"""
from __future__ import annotations

import logging

from telegram import BotCommand, Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from libs.core.settings import get_settings
from libs.logging import setup_logging
from libs.services import Services, build_services
from libs.storage.sql import SqlGalleryStore
from libs.tg import message_from_update

logger = logging.getLogger(__name__)

COMMANDS = {
    "en": [
        BotCommand("start", "Create a new event gallery"),
        BotCommand("done", "Finish and get the share link"),
    ],
    "ru": [
        BotCommand("start", "Создать новую галерею"),
        BotCommand("done", "Завершить и получить ссылку"),
    ],
}


def _services(context: ContextTypes.DEFAULT_TYPE) -> Services:
    return context.application.bot_data["services"]


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Hand every message to the gallery dispatcher."""
    msg = message_from_update(update)
    if msg is None:
        return
    try:
        await _services(context).dispatcher.handle(msg)
    except Exception:
        logger.exception("Update processing failed", extra={"chat_id": msg.chat_id})


async def _post_init(app: Application) -> None:
    await app.bot.set_my_commands(COMMANDS["en"])
    await app.bot.set_my_commands(COMMANDS["ru"], language_code="ru")
    store = app.bot_data["services"].store
    if isinstance(store, SqlGalleryStore):
        await store.db.init()


async def _post_shutdown(app: Application) -> None:
    await app.bot_data["services"].aclose()


def main() -> None:
    """Run the Telegram bot with long polling."""
    setup_logging()
    settings = get_settings()
    token = settings.telegram_bot_token
    if not token:
        raise RuntimeError("Missing TELEGRAM_BOT_TOKEN")
    app = (
        Application.builder()
        .token(token)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )
    app.bot_data["services"] = build_services(settings, bot=app.bot)
    app.add_handler(MessageHandler(filters.ALL, on_message))
    app.run_polling(allowed_updates=["message"])


if __name__ == "__main__":
    main()
