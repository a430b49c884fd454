"""Gallery stores: in-memory and SQL-backed."""

from __future__ import annotations

from libs.core.settings import Settings

from .base import CounterName, GalleryStore
from .memory import MemoryGalleryStore


def build_store(settings: Settings) -> GalleryStore:
    """Return the store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "sql":
        from libs.db import Database

        from .sql import SqlGalleryStore

        return SqlGalleryStore(Database(settings.database_url))
    return MemoryGalleryStore()


__all__ = ["GalleryStore", "CounterName", "MemoryGalleryStore", "build_store"]
