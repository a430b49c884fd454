"""Telegram Bot API adapters."""

from .files import FileSource, TelegramFiles
from .notifier import Notifier, TelegramNotifier
from .updates import message_from_update, parse_update

__all__ = [
    "FileSource",
    "TelegramFiles",
    "Notifier",
    "TelegramNotifier",
    "message_from_update",
    "parse_update",
]
