"""Durable device-local key -> JSON blob store."""

import asyncio
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from ..config import Config
from ..errors import FitLogError

__all__ = ["LocalStore", "StorageError"]

logger = logging.getLogger(__name__)


class StorageError(FitLogError):
    """Device storage failed (I/O, full disk, closed store)."""

    pass


class LocalStore:
    """SQLite-backed key/value store.

    Values are opaque strings (JSON text in practice). Each key is written
    independently; there is no multi-key transaction.
    """

    def __init__(self, db_path: Optional[Union[Path, str]] = None):
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        if db_path is None:
            db_path = Config.get_data_dir() / "fitlog.db"

        self.db_path = db_path
        self._conn_lock = threading.Lock()
        self._connection: Optional[sqlite3.Connection] = None
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get the shared database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                str(self.db_path), check_same_thread=False
            )
        return self._connection

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Context manager for database cursor."""
        with self._conn_lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def _init_db(self) -> None:
        """Initialize the database schema."""
        if str(self.db_path) != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self._cursor() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    # Blocking primitives, run off the event loop

    def _get(self, key: str) -> Optional[str]:
        with self._cursor() as cursor:
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None

    def _set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, now),
            )

    def _remove_many(self, keys: list[str]) -> None:
        if not keys:
            return
        with self._cursor() as cursor:
            placeholders = ",".join("?" * len(keys))
            cursor.execute(
                f"DELETE FROM kv_store WHERE key IN ({placeholders})",
                keys,
            )

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StorageError(str(e)) from e

    # Public async API

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        return await self._run(self._get, key)

    async def set(self, key: str, value: str) -> None:
        """Store a value under key, replacing any previous value."""
        await self._run(self._set, key, value)

    async def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        await self._run(self._remove_many, [key])

    async def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several keys."""
        await self._run(self._remove_many, list(keys))

    def lock(self, key: str) -> asyncio.Lock:
        """Per-key mutex serialising read-modify-write of one collection."""
        if key not in self._key_locks:
            self._key_locks[key] = asyncio.Lock()
        return self._key_locks[key]

    def close(self) -> None:
        """Close the database connection."""
        with self._conn_lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
