from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.core.exceptions import StorageError
from libs.core.models import (
    ConversationState,
    Event,
    MediaItem,
    Phase,
    UploadCounters,
)
from libs.db import Database, models
from libs.db.repositories import ChatStateRepo, EventRepo

from .base import CounterName, GalleryStore

logger = logging.getLogger(__name__)


def _event_from_row(row: models.EventRow) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        description=row.description or "",
        media=[MediaItem.model_validate(m) for m in (row.media or [])],
        created_at=row.created_at,
    )


def _state_from_row(row: models.ChatStateRow) -> ConversationState:
    counters = (
        UploadCounters(success=row.success, failed=row.failed) if row.has_counters else None
    )
    return ConversationState(
        chat_id=row.chat_id,
        event_id=row.event_id,
        phase=Phase(row.phase),
        counters=counters,
        updated_at=row.updated_at,
    )


class SqlGalleryStore(GalleryStore):
    """Durable store on top of SQLAlchemy; errors surface as StorageError."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def create_event(self, event: Event) -> None:
        try:
            async with self.db.session() as session:
                await EventRepo(session).create(
                    id=event.id,
                    title=event.title,
                    description=event.description,
                    media=[m.model_dump(mode="json", by_alias=True) for m in event.media],
                    created_at=event.created_at,
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not create event {event.id}") from exc

    async def get_event(self, event_id: str) -> Optional[Event]:
        try:
            async with self.db.session() as session:
                row = await EventRepo(session).get(event_id)
                return _event_from_row(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not load event {event_id}") from exc

    async def update_event(
        self,
        event_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        fields = {}
        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description
        try:
            async with self.db.session() as session:
                await EventRepo(session).update(event_id, **fields)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update event {event_id}") from exc

    async def append_media(self, event_id: str, item: MediaItem) -> None:
        try:
            async with self.db.session() as session:
                found = await EventRepo(session).append_media(
                    event_id, item.model_dump(mode="json", by_alias=True)
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not append media to {event_id}") from exc
        if not found:
            logger.warning("Media appended to unknown event", extra={"event_id": event_id})

    async def get_state(self, chat_id: int) -> Optional[ConversationState]:
        try:
            async with self.db.session() as session:
                row = await ChatStateRepo(session).get(chat_id)
                return _state_from_row(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not load state for chat {chat_id}") from exc

    async def save_state(self, state: ConversationState) -> None:
        counters = state.counters
        try:
            async with self.db.session() as session:
                await ChatStateRepo(session).upsert(
                    state.chat_id,
                    event_id=state.event_id,
                    phase=state.phase.value,
                    has_counters=counters is not None,
                    success=counters.success if counters else 0,
                    failed=counters.failed if counters else 0,
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not save state for chat {state.chat_id}") from exc

    async def delete_state(self, chat_id: int) -> None:
        try:
            async with self.db.session() as session:
                await ChatStateRepo(session).delete(chat_id)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not delete state for chat {chat_id}") from exc

    async def increment_counter(
        self, chat_id: int, counter: CounterName
    ) -> Optional[UploadCounters]:
        try:
            async with self.db.session() as session:
                row = await ChatStateRepo(session).increment(chat_id, counter)
                if row is None:
                    return None
                return UploadCounters(success=row.success, failed=row.failed)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update counters for chat {chat_id}") from exc

    async def close(self) -> None:
        await self.db.dispose()


__all__ = ["SqlGalleryStore"]
