"""Local record store for the sync client.

This module provides:
- RecordStore: The interface the sync engine consumes
- LocalRecordStore: SQLite-based implementation
- LocalStoreError: Raised when reading or writing the store fails

Architecture:
    The store is the single write path for local state. Every write holds
    one re-entrant lock; ``transaction()`` exposes that lock so callers can
    make a read-check-write sequence atomic. The lock is never held across
    a network call.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Protocol

from recordsync.client.domain import Record, SyncStatus
from recordsync.core.types import SyncError, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class LocalStoreError(SyncError):
    """Reading or writing the local store failed."""


class RecordStore(Protocol):
    """CRUD and query surface over persisted records."""

    def insert(self, record: Record) -> None: ...

    def get(self, record_id: str) -> Record | None: ...

    def save(self, record: Record) -> None: ...

    def delete(self, record_id: str) -> None: ...

    def list_active(self) -> list[Record]: ...

    def list_trash(self) -> list[Record]: ...

    def list_unsynced(self) -> list[Record]: ...

    def list_expired(self, cutoff: datetime) -> list[Record]: ...

    def count_by_status(self) -> dict[SyncStatus, int]: ...

    def transaction(self) -> contextlib.AbstractContextManager[None]: ...


def _row_to_record(row: sqlite3.Row) -> Record:
    """Create a Record from a database row."""
    return Record(
        id=row["id"],
        title=row["title"],
        completed=bool(row["completed"]),
        created_at=parse_timestamp(row["created_at"]),  # type: ignore[arg-type]
        updated_at=parse_timestamp(row["updated_at"]),  # type: ignore[arg-type]
        deleted_at=parse_timestamp(row["deleted_at"]),
        _sync_status=SyncStatus(row["sync_status"]),
    )


class LocalRecordStore:
    """SQLite-based local record store."""

    def __init__(self, db_path: Path) -> None:
        """Initialize local store database.

        Args:
            db_path: Path to SQLite database file.
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        # Lock for thread-safe database access
        self._lock = threading.RLock()

        self._conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,
            isolation_level=None,  # Autocommit mode
        )
        self._conn.row_factory = sqlite3.Row

        self._conn.execute("PRAGMA journal_mode=WAL")

        self._create_tables()

    def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS records (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                completed INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                deleted_at TEXT,
                sync_status INTEGER NOT NULL DEFAULT 1
            );

            CREATE INDEX IF NOT EXISTS idx_records_sync_status
                ON records (sync_status);
            CREATE INDEX IF NOT EXISTS idx_records_deleted_at
                ON records (deleted_at);
        """)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the write lock for a read-check-write sequence."""
        with self._lock:
            yield

    def _execute(self, sql: str, params: tuple[object, ...] = ()) -> sqlite3.Cursor:
        """Execute a statement under the lock, wrapping sqlite errors."""
        try:
            with self._lock:
                return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise LocalStoreError(f"Local store error: {e}") from e

    def _query(self, sql: str, params: tuple[object, ...] = ()) -> list[Record]:
        """Run a SELECT and convert rows to records."""
        try:
            with self._lock:
                rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise LocalStoreError(f"Local store error: {e}") from e
        return [_row_to_record(row) for row in rows]

    # === Record operations ===

    def insert(self, record: Record) -> None:
        """Insert a new record.

        Raises:
            LocalStoreError: If a record with the same id exists.
        """
        self._execute(
            """
            INSERT INTO records (
                id, title, completed, created_at, updated_at, deleted_at, sync_status
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            self._params(record),
        )

    def save(self, record: Record) -> None:
        """Insert or replace a record."""
        self._execute(
            """
            INSERT OR REPLACE INTO records (
                id, title, completed, created_at, updated_at, deleted_at, sync_status
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            self._params(record),
        )

    def get(self, record_id: str) -> Record | None:
        """Get a record by id.

        Returns:
            Record if found, None otherwise.
        """
        records = self._query("SELECT * FROM records WHERE id = ?", (record_id,))
        return records[0] if records else None

    def delete(self, record_id: str) -> None:
        """Permanently remove a record."""
        self._execute("DELETE FROM records WHERE id = ?", (record_id,))

    @staticmethod
    def _params(record: Record) -> tuple[object, ...]:
        return (
            record.id,
            record.title,
            int(record.completed),
            format_timestamp(record.created_at),
            format_timestamp(record.updated_at),
            format_timestamp(record.deleted_at),
            int(record.sync_status),
        )

    # === Queries ===

    def list_active(self) -> list[Record]:
        """List non-deleted records, newest first."""
        return self._query(
            "SELECT * FROM records WHERE deleted_at IS NULL ORDER BY created_at DESC"
        )

    def list_trash(self) -> list[Record]:
        """List soft-deleted records, newest first."""
        return self._query(
            "SELECT * FROM records WHERE deleted_at IS NOT NULL ORDER BY created_at DESC"
        )

    def list_unsynced(self) -> list[Record]:
        """List records with an outstanding remote operation, oldest first."""
        return self._query(
            "SELECT * FROM records WHERE sync_status != ? ORDER BY created_at ASC",
            (int(SyncStatus.SYNCED),),
        )

    def list_expired(self, cutoff: datetime) -> list[Record]:
        """List soft-deleted records whose deleted_at is before ``cutoff``.

        Timestamps are stored as normalized UTC ISO strings, so text
        comparison orders them chronologically.
        """
        return self._query(
            "SELECT * FROM records WHERE deleted_at IS NOT NULL AND deleted_at < ?",
            (format_timestamp(cutoff),),
        )

    def count_by_status(self) -> dict[SyncStatus, int]:
        """Count records per sync status."""
        try:
            with self._lock:
                rows = self._conn.execute(
                    "SELECT sync_status, COUNT(*) AS count FROM records GROUP BY sync_status"
                ).fetchall()
        except sqlite3.Error as e:
            raise LocalStoreError(f"Local store error: {e}") from e
        return {SyncStatus(row["sync_status"]): row["count"] for row in rows}
