"""Assemble the gallery services from settings."""

from __future__ import annotations

from dataclasses import dataclass

from telegram import Bot

from libs.core.settings import Settings
from libs.storage import GalleryStore, build_store
from libs.tg import FileSource, Notifier, TelegramFiles, TelegramNotifier
from libs.tg.gateway import BotGateway
from libs.uploaders import MediaUploader, build_uploader
from libs.usecases import (
    ConversationTracker,
    GetEvent,
    MediaIngestor,
    WebhookDispatcher,
)


@dataclass
class Services:
    store: GalleryStore
    files: FileSource
    notifier: Notifier
    uploader: MediaUploader
    tracker: ConversationTracker
    dispatcher: WebhookDispatcher
    get_event: GetEvent

    async def aclose(self) -> None:
        await self.uploader.aclose()
        await self.store.close()
        for gateway in (self.files, self.notifier):
            if isinstance(gateway, BotGateway):
                await gateway.shutdown()


def build_services(
    settings: Settings,
    *,
    bot: Bot | None = None,
    store: GalleryStore | None = None,
    files: FileSource | None = None,
    notifier: Notifier | None = None,
    uploader: MediaUploader | None = None,
) -> Services:
    """Wire everything together; explicit arguments override the defaults."""
    if bot is None and (files is None or notifier is None):
        if not settings.telegram_bot_token:
            raise RuntimeError("Missing TELEGRAM_BOT_TOKEN")
        bot = Bot(settings.telegram_bot_token)
    store = store or build_store(settings)
    files = files or TelegramFiles(bot)
    notifier = notifier or TelegramNotifier(bot)
    uploader = uploader or build_uploader(settings, files)
    ingestor = MediaIngestor(
        store,
        uploader,
        files,
        trusted_hosts=settings.trusted_url_hosts,
        progress_every=settings.progress_every,
    )
    tracker = ConversationTracker(
        store, ingestor, default_title=settings.default_event_title
    )
    dispatcher = WebhookDispatcher(
        tracker,
        notifier,
        frontend_url=settings.frontend_url,
        failure_notice=settings.failure_notice,
        out_of_phase=settings.out_of_phase,
    )
    return Services(
        store=store,
        files=files,
        notifier=notifier,
        uploader=uploader,
        tracker=tracker,
        dispatcher=dispatcher,
        get_event=GetEvent(store, uploader),
    )


__all__ = ["Services", "build_services"]
