"""Repository classes for CRUD operations on ORM models."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from . import models


class EventRepo:
    """CRUD operations for :class:`models.EventRow`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, **fields: Any) -> models.EventRow:
        row = models.EventRow(**fields)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get(self, event_id: str, *, for_update: bool = False) -> Optional[models.EventRow]:
        stmt = select(models.EventRow).where(models.EventRow.id == event_id)
        if for_update:
            stmt = stmt.with_for_update()
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def update(self, event_id: str, **fields: Any) -> None:
        if not fields:
            return
        await self.session.execute(
            update(models.EventRow).where(models.EventRow.id == event_id).values(**fields)
        )

    async def append_media(self, event_id: str, item: Dict[str, Any]) -> bool:
        row = await self.get(event_id, for_update=True)
        if row is None:
            return False
        # Reassign so the JSON column is flagged dirty
        row.media = [*(row.media or []), item]
        await self.session.flush()
        return True


class ChatStateRepo:
    """CRUD operations for :class:`models.ChatStateRow`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, chat_id: int) -> Optional[models.ChatStateRow]:
        return await self.session.get(models.ChatStateRow, chat_id)

    async def upsert(self, chat_id: int, **fields: Any) -> models.ChatStateRow:
        row = await self.get(chat_id)
        if row is None:
            row = models.ChatStateRow(chat_id=chat_id, **fields)
            self.session.add(row)
        else:
            for key, value in fields.items():
                setattr(row, key, value)
        await self.session.flush()
        return row

    async def delete(self, chat_id: int) -> None:
        await self.session.execute(
            delete(models.ChatStateRow).where(models.ChatStateRow.chat_id == chat_id)
        )

    async def increment(self, chat_id: int, column: str) -> Optional[models.ChatStateRow]:
        target = getattr(models.ChatStateRow, column)
        res = await self.session.execute(
            update(models.ChatStateRow)
            .where(models.ChatStateRow.chat_id == chat_id)
            .values({column: target + 1, "has_counters": True})
        )
        if res.rowcount == 0:
            return None
        stmt = (
            select(models.ChatStateRow)
            .where(models.ChatStateRow.chat_id == chat_id)
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(stmt)).scalar_one()


__all__ = ["EventRepo", "ChatStateRepo"]
