from __future__ import annotations

"""Database setup for SQLAlchemy with an async driver."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class Database:
    """Owns one async engine and its session factory.

    The engine is created on first use so that importing the module never
    requires a database driver to be installed.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            # - pool_pre_ping: validate connections before using
            # - pool_recycle: proactively recycle connections to avoid server-side timeouts
            options = {"pool_pre_ping": True}
            if not self.url.startswith("sqlite"):
                options["pool_recycle"] = 1800
            self._engine = create_async_engine(self.url, echo=False, **options)
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a transactional scope around a series of operations."""

        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init(self, max_attempts: int = 5, delay: float = 5) -> None:
        """Create tables, retrying while the database is still starting.

        If all attempts fail, the last exception is propagated.
        """

        # Import models to ensure Base.metadata is populated
        from . import models  # noqa: F401

        last_exc: SQLAlchemyError | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                logger.info("DB schema ensured (attempt %d)", attempt)
                return
            except SQLAlchemyError as exc:
                last_exc = exc
                if attempt == max_attempts:
                    break
                logger.warning(
                    "DB init attempt %d failed: %s. Retrying in %ss", attempt, exc, delay
                )
                await asyncio.sleep(delay)

        logger.error("DB init failed after %d attempts", max_attempts)
        if last_exc is not None:
            raise last_exc

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None


__all__ = ["Base", "Database"]
