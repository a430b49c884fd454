from __future__ import annotations

import logging
from typing import Literal
from urllib.parse import quote, urlencode

from libs.core.i18n import language_for, translate
from libs.core.inbound import InboundMessage, UrlCandidate
from libs.core.models import Event, Phase
from libs.tg.notifier import Notifier

from .conversation import ConversationTracker

logger = logging.getLogger(__name__)

_EXPECT_KEY = {
    None: "expect_start",
    Phase.AWAITING_TITLE: "expect_title",
    Phase.AWAITING_DESCRIPTION: "expect_description",
    Phase.AWAITING_URLS: "expect_media",
}


def share_link(frontend_url: str, event: Event) -> str:
    query = urlencode(
        {"event": event.id, "title": event.title, "description": event.description or ""},
        quote_via=quote,
    )
    return f"{frontend_url}?{query}"


class WebhookDispatcher:
    """Route one inbound chat message through the gallery conversation.

    ``/start`` and ``/done`` are handled in any phase; everything else is
    interpreted according to the chat's current phase.
    """

    def __init__(
        self,
        tracker: ConversationTracker,
        notifier: Notifier,
        *,
        frontend_url: str = "",
        failure_notice: Literal["aggregate", "per_item"] = "aggregate",
        out_of_phase: Literal["ignore", "reject"] = "ignore",
    ) -> None:
        self.tracker = tracker
        self.notifier = notifier
        self.frontend_url = frontend_url
        self.failure_notice = failure_notice
        self.out_of_phase = out_of_phase

    async def _reply(self, chat_id: int, lang: str, key: str, **params) -> None:
        # Delivery failures are already logged by the notifier
        await self.notifier.send(chat_id, translate(lang, key, **params))

    async def _out_of_phase(self, msg: InboundMessage, lang: str, phase: Phase | None) -> None:
        logger.debug(
            "Ignoring out-of-phase message",
            extra={"chat_id": msg.chat_id, "phase": phase.value if phase else None},
        )
        if self.out_of_phase == "reject":
            await self._reply(msg.chat_id, lang, _EXPECT_KEY[phase])

    async def handle(self, msg: InboundMessage) -> None:
        lang = language_for(msg.language_code)
        command = msg.command
        if command == "start":
            await self.tracker.begin(msg.chat_id)
            await self._reply(msg.chat_id, lang, "event_created")
            return
        if command == "done":
            await self._finish(msg, lang)
            return

        state = await self.tracker.current(msg.chat_id)
        phase = state.phase if state else None
        if phase is None or command is not None:
            await self._out_of_phase(msg, lang, phase)
            return

        if phase in (Phase.AWAITING_TITLE, Phase.AWAITING_DESCRIPTION):
            text = msg.text
            if msg.attachment is not None or not text.strip():
                await self._out_of_phase(msg, lang, phase)
                return
            entered = await self.tracker.advance(msg.chat_id, text)
            if entered is Phase.AWAITING_DESCRIPTION:
                await self._reply(msg.chat_id, lang, "title_set", title=text)
            elif entered is Phase.AWAITING_URLS:
                await self._reply(msg.chat_id, lang, "description_set")
            return

        candidate = msg.attachment
        if candidate is None and msg.text.strip().startswith("http"):
            candidate = UrlCandidate(msg.text.strip())
        if candidate is None:
            await self._out_of_phase(msg, lang, phase)
            return
        outcome = await self.tracker.ingest(msg.chat_id, candidate)
        if outcome is None:
            return
        if outcome.error and self.failure_notice == "per_item":
            await self._reply(msg.chat_id, lang, "item_failed", reason=outcome.error)
        if outcome.progress_due:
            await self._reply(
                msg.chat_id,
                lang,
                "progress",
                success=outcome.counters.success,
                failed=outcome.counters.failed,
            )

    async def _finish(self, msg: InboundMessage, lang: str) -> None:
        finished = await self.tracker.finish(msg.chat_id)
        if finished is None:
            await self._out_of_phase(msg, lang, None)
            return
        if finished.counters is not None:
            await self._reply(
                msg.chat_id,
                lang,
                "final_summary",
                success=finished.counters.success,
                failed=finished.counters.failed,
            )
        event = finished.event
        await self._reply(
            msg.chat_id,
            lang,
            "event_ready",
            title=event.title,
            link=share_link(self.frontend_url, event),
        )


__all__ = ["WebhookDispatcher", "share_link"]
