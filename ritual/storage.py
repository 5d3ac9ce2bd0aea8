"""Key-value persistence collaborators for the habit store.

The store only ever sees the ``Storage`` protocol: three coroutines over
opaque byte strings, last write wins.
"""

import asyncio
import sqlite3
from pathlib import Path
from typing import Protocol

from . import db

__all__ = ["MemoryStorage", "SqliteStorage", "Storage"]


class Storage(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, data: bytes) -> bool: ...

    async def remove(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage, mostly for tests."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self.data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, data: bytes) -> bool:
        self.data[key] = data
        return True

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SqliteStorage:
    """Stores each key as one row of the ``kv`` table."""

    def __init__(self, db_path: Path):
        self.db_path = db_path

    def _get(self, key: str) -> bytes | None:
        with db.get_db(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    def _set(self, key: str, data: bytes) -> bool:
        try:
            with db.get_db(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                    (key, sqlite3.Binary(data)),
                )
        except sqlite3.Error:
            return False
        return True

    def _remove(self, key: str) -> None:
        with db.get_db(self.db_path) as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    async def get(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, data: bytes) -> bool:
        return await asyncio.to_thread(self._set, key, data)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)
