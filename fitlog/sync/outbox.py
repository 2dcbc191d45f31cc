"""Durable outbox for pushes that could not reach the server."""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from ..config import Config, MAX_OUTBOX_SIZE

__all__ = ["Outbox", "OutboxItem"]

logger = logging.getLogger(__name__)


@dataclass
class OutboxItem:
    """A push waiting to be replayed."""

    id: int
    path: str
    method: str
    body: Any
    created_at: datetime
    retry_count: int = 0

    @classmethod
    def from_row(cls, row: tuple) -> "OutboxItem":
        """Create from database row."""
        return cls(
            id=row[0],
            path=row[1],
            method=row[2],
            body=json.loads(row[3]) if row[3] is not None else None,
            created_at=datetime.fromisoformat(row[4]),
            retry_count=row[5],
        )


class Outbox:
    """SQLite-based queue of failed pushes, replayed oldest first.

    Only used when the outbox is enabled in config; without it a failed push
    is simply dropped after the in-call retries.
    """

    def __init__(
        self,
        db_path: Optional[Union[Path, str]] = None,
        max_size: int = MAX_OUTBOX_SIZE,
    ):
        """Initialize the outbox.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            max_size: Maximum number of pending pushes to keep
        """
        if db_path is None:
            db_path = Config.get_data_dir() / "outbox.db"

        self.db_path = db_path
        self.max_size = max_size
        self._conn_lock = threading.Lock()
        self._connection: Optional[sqlite3.Connection] = None
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
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
                CREATE TABLE IF NOT EXISTS outbox (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    path TEXT NOT NULL,
                    method TEXT NOT NULL,
                    body TEXT,
                    created_at TEXT NOT NULL,
                    retry_count INTEGER DEFAULT 0
                )
                """
            )

    def enqueue(self, path: str, method: str, body: Any) -> int:
        """Append a push to the outbox.

        Returns:
            Row id of the new item
        """
        current_size = self.size()
        if current_size >= self.max_size:
            to_remove = current_size - self.max_size + 1
            self._remove_oldest(to_remove)
            logger.warning(f"Outbox full, removed {to_remove} oldest pushes")

        now = datetime.now(timezone.utc).isoformat()
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO outbox (path, method, body, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (path, method, json.dumps(body) if body is not None else None, now),
            )
            return cursor.lastrowid

    def peek(self, batch_size: int = 50) -> list[OutboxItem]:
        """Get a batch of pending pushes (oldest first) without removing them."""
        with self._cursor() as cursor:
            cursor.execute(
                """
                SELECT id, path, method, body, created_at, retry_count
                FROM outbox
                ORDER BY id ASC
                LIMIT ?
                """,
                (batch_size,),
            )
            return [OutboxItem.from_row(tuple(row)) for row in cursor.fetchall()]

    def remove(self, item_ids: list[int]) -> int:
        """Remove delivered items."""
        if not item_ids:
            return 0

        with self._cursor() as cursor:
            placeholders = ",".join("?" * len(item_ids))
            cursor.execute(
                f"DELETE FROM outbox WHERE id IN ({placeholders})",
                item_ids,
            )
            return cursor.rowcount

    def increment_retry(self, item_ids: list[int]) -> None:
        if not item_ids:
            return

        with self._cursor() as cursor:
            placeholders = ",".join("?" * len(item_ids))
            cursor.execute(
                f"""
                UPDATE outbox
                SET retry_count = retry_count + 1
                WHERE id IN ({placeholders})
                """,
                item_ids,
            )

    def remove_failed(self, max_retries: int) -> int:
        """Drop items that have been replayed max_retries times."""
        with self._cursor() as cursor:
            cursor.execute(
                "DELETE FROM outbox WHERE retry_count >= ?",
                (max_retries,),
            )
            count = cursor.rowcount
            if count > 0:
                logger.warning(f"Gave up on {count} pushes after {max_retries} retries")
            return count

    def _remove_oldest(self, count: int) -> int:
        with self._cursor() as cursor:
            cursor.execute(
                """
                DELETE FROM outbox
                WHERE id IN (
                    SELECT id FROM outbox
                    ORDER BY id ASC
                    LIMIT ?
                )
                """,
                (count,),
            )
            return cursor.rowcount

    def size(self) -> int:
        """Get the number of pending pushes."""
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM outbox")
            return cursor.fetchone()[0]

    def is_empty(self) -> bool:
        return self.size() == 0

    def clear(self) -> int:
        """Drop every pending push."""
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM outbox")
            return cursor.rowcount

    def close(self) -> None:
        """Close the database connection."""
        with self._conn_lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
