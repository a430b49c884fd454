from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal, Optional

from libs.core.models import ConversationState, Event, MediaItem, UploadCounters

CounterName = Literal["success", "failed"]


class GalleryStore(ABC):
    """Persistence for events and per-chat conversation state.

    Implementations must make every single method call atomic with respect
    to the record it touches; callers never hold a lock across calls.
    """

    # Events -----------------------------------------------------------
    @abstractmethod
    async def create_event(self, event: Event) -> None:
        """Insert a new event."""

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[Event]:
        """Return the event or ``None`` if it does not exist."""

    @abstractmethod
    async def update_event(
        self,
        event_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        """Overwrite the given text fields of an event."""

    @abstractmethod
    async def append_media(self, event_id: str, item: MediaItem) -> None:
        """Append ``item`` to the end of the event's media list."""

    # Conversation state -----------------------------------------------
    @abstractmethod
    async def get_state(self, chat_id: int) -> Optional[ConversationState]:
        """Return the live state for a chat, if any."""

    @abstractmethod
    async def save_state(self, state: ConversationState) -> None:
        """Insert or replace the state for ``state.chat_id``."""

    @abstractmethod
    async def delete_state(self, chat_id: int) -> None:
        """Remove the chat's state; a missing state is not an error."""

    @abstractmethod
    async def increment_counter(
        self, chat_id: int, counter: CounterName
    ) -> Optional[UploadCounters]:
        """Bump one upload counter and return the counters after the bump.

        Returns ``None`` when the chat has no state.
        """

    async def close(self) -> None:
        """Release connections held by the store."""


__all__ = ["GalleryStore", "CounterName"]
