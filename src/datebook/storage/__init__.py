"""
Persistence backends for the task record.

Components:
- sqlite_storage.py: SQLite key/value table (default)
- json_storage.py: single JSON file
- MemoryStorage: process-local dict, nothing survives exit
"""

from __future__ import annotations

import logging

from .json_storage import JsonFileStorage
from .sqlite_storage import SqliteKeyValueStorage

logger = logging.getLogger(__name__)


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


def open_storage(settings) -> SqliteKeyValueStorage | JsonFileStorage | MemoryStorage:
    """Build the backend named by settings.storage_backend."""
    backend = str(getattr(settings, "storage_backend", "sqlite")).strip().lower()

    if backend == "sqlite":
        return SqliteKeyValueStorage(settings.tasks_db_path)
    if backend == "json":
        return JsonFileStorage(settings.tasks_json_path)
    if backend == "memory":
        logger.info("Using in-memory storage; tasks will not survive exit.")
        return MemoryStorage()

    raise ValueError(f"Unknown storage backend: {backend!r} (expected sqlite, json or memory)")


__all__ = ["JsonFileStorage", "MemoryStorage", "SqliteKeyValueStorage", "open_storage"]
