from __future__ import annotations

from typing import Dict, Optional

from libs.core.models import ConversationState, Event, MediaItem, UploadCounters, utcnow

from .base import CounterName, GalleryStore


class MemoryGalleryStore(GalleryStore):
    """In-process tables; everything is lost on restart.

    Records are copied on the way in and out so that callers cannot mutate
    stored state behind the store's back.
    """

    def __init__(self) -> None:
        self.events: Dict[str, Event] = {}
        self.states: Dict[int, ConversationState] = {}

    async def create_event(self, event: Event) -> None:
        self.events[event.id] = event.model_copy(deep=True)

    async def get_event(self, event_id: str) -> Optional[Event]:
        event = self.events.get(event_id)
        return event.model_copy(deep=True) if event else None

    async def update_event(
        self,
        event_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        event = self.events.get(event_id)
        if event is None:
            return
        if title is not None:
            event.title = title
        if description is not None:
            event.description = description

    async def append_media(self, event_id: str, item: MediaItem) -> None:
        event = self.events.get(event_id)
        if event is not None:
            event.media.append(item.model_copy())

    async def get_state(self, chat_id: int) -> Optional[ConversationState]:
        state = self.states.get(chat_id)
        return state.model_copy(deep=True) if state else None

    async def save_state(self, state: ConversationState) -> None:
        stored = state.model_copy(deep=True)
        stored.updated_at = utcnow()
        self.states[state.chat_id] = stored

    async def delete_state(self, chat_id: int) -> None:
        self.states.pop(chat_id, None)

    async def increment_counter(
        self, chat_id: int, counter: CounterName
    ) -> Optional[UploadCounters]:
        state = self.states.get(chat_id)
        if state is None:
            return None
        if state.counters is None:
            state.counters = UploadCounters()
        setattr(state.counters, counter, getattr(state.counters, counter) + 1)
        state.updated_at = utcnow()
        return state.counters.model_copy()


__all__ = ["MemoryGalleryStore"]
