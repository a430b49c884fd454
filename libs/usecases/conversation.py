from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from libs.core.inbound import MediaCandidate
from libs.core.models import ConversationState, Event, Phase, UploadCounters
from libs.storage import GalleryStore

from .ingest_media import IngestOutcome, MediaIngestor

logger = logging.getLogger(__name__)


def new_event_id() -> str:
    """Time-based id; the random suffix keeps ids unique within a millisecond."""
    return f"event-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


@dataclass
class FinishedEvent:
    event: Event
    counters: Optional[UploadCounters] = None


class ConversationTracker:
    """Per-chat state machine for building one gallery.

    ``none -> awaiting_title -> awaiting_description -> awaiting_urls -> none``

    Transitions requested from the wrong phase are silent no-ops and the
    phase never moves backwards.
    """

    def __init__(
        self,
        store: GalleryStore,
        ingestor: MediaIngestor,
        *,
        default_title: str = "Event Gallery",
        id_factory: Callable[[], str] = new_event_id,
    ) -> None:
        self.store = store
        self.ingestor = ingestor
        self.default_title = default_title
        self.id_factory = id_factory

    async def current(self, chat_id: int) -> Optional[ConversationState]:
        return await self.store.get_state(chat_id)

    async def begin(self, chat_id: int) -> str:
        """Create a fresh event; any previous live event of the chat is dropped."""
        event_id = self.id_factory()
        await self.store.create_event(Event(id=event_id, title=self.default_title))
        await self.store.save_state(
            ConversationState(chat_id=chat_id, event_id=event_id, phase=Phase.AWAITING_TITLE)
        )
        logger.info("Event created", extra={"chat_id": chat_id, "event_id": event_id})
        return event_id

    async def advance(self, chat_id: int, text: str) -> Optional[Phase]:
        """Store a title or description and return the phase entered."""
        state = await self.store.get_state(chat_id)
        if state is None:
            return None
        if state.phase is Phase.AWAITING_TITLE:
            await self.store.update_event(state.event_id, title=text)
            state.phase = Phase.AWAITING_DESCRIPTION
        elif state.phase is Phase.AWAITING_DESCRIPTION:
            await self.store.update_event(state.event_id, description=text)
            state.phase = Phase.AWAITING_URLS
            state.counters = UploadCounters()
        else:
            return None
        await self.store.save_state(state)
        return state.phase

    async def ingest(self, chat_id: int, candidate: MediaCandidate) -> Optional[IngestOutcome]:
        state = await self.store.get_state(chat_id)
        if state is None or state.phase is not Phase.AWAITING_URLS:
            return None
        return await self.ingestor(state, candidate)

    async def finish(self, chat_id: int) -> Optional[FinishedEvent]:
        """Snapshot the chat's event and forget the conversation."""
        state = await self.store.get_state(chat_id)
        if state is None:
            return None
        event = await self.store.get_event(state.event_id)
        await self.store.delete_state(chat_id)
        if event is None:
            logger.warning(
                "State pointed at a missing event",
                extra={"chat_id": chat_id, "event_id": state.event_id},
            )
            return None
        return FinishedEvent(event=event, counters=state.counters)


__all__ = ["ConversationTracker", "FinishedEvent", "new_event_id"]
