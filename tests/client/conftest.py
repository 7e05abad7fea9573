"""Shared fixtures for client tests.

Provides an in-memory remote store, a temporary SQLite store, a
controllable clock and an engine wired to all three.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from recordsync.client.api import TransportError
from recordsync.client.domain import Record
from recordsync.client.state import LocalRecordStore
from recordsync.client.sync import SyncEngine


class FakeRemoteStore:
    """In-memory stand-in for the remote records table.

    Set ``online`` to drive the connectivity signal and add operation
    names ("create", "update", "soft_delete", "fetch_all", "fetch_one")
    to ``failing`` to make them raise TransportError.
    """

    def __init__(self) -> None:
        self.rows: dict[str, Record] = {}
        self.calls: list[tuple[str, str]] = []
        self.failing: set[str] = set()
        self.online = True

    @staticmethod
    def _copy(record: Record) -> Record:
        return Record.from_remote(record.to_remote())

    def _call(self, operation: str, record_id: str = "*") -> None:
        self.calls.append((operation, record_id))
        if operation in self.failing:
            raise TransportError(f"{operation} failed", 503)

    def put(self, record: Record) -> None:
        """Seed a remote row."""
        self.rows[record.id] = self._copy(record)

    def operations(self) -> list[str]:
        """Names of the operations called so far."""
        return [operation for operation, _ in self.calls]

    def fetch_all(self) -> list[Record]:
        self._call("fetch_all")
        return [self._copy(r) for r in self.rows.values() if r.deleted_at is None]

    def fetch_one(self, record_id: str) -> Record | None:
        self._call("fetch_one", record_id)
        row = self.rows.get(record_id)
        return self._copy(row) if row else None

    def create(self, record: Record) -> Record:
        self._call("create", record.id)
        self.rows[record.id] = self._copy(record)
        return self._copy(record)

    def update(self, record: Record) -> Record:
        self._call("update", record.id)
        if record.id not in self.rows:
            raise TransportError(f"Record {record.id} not found on remote store", 404)
        self.rows[record.id] = self._copy(record)
        return self._copy(record)

    def soft_delete(self, record_id: str, deleted_at: datetime) -> Record:
        self._call("soft_delete", record_id)
        if record_id not in self.rows:
            raise TransportError(f"Record {record_id} not found on remote store", 404)
        self.rows[record_id].deleted_at = deleted_at
        return self._copy(self.rows[record_id])

    def health_check(self) -> bool:
        return self.online

    def close(self) -> None:
        pass


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def remote() -> FakeRemoteStore:
    """Empty in-memory remote store, online."""
    return FakeRemoteStore()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[LocalRecordStore]:
    """Local SQLite store in a temporary directory."""
    local = LocalRecordStore(tmp_path / "records.db")
    yield local
    local.close()


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at 2025-01-01 12:00 UTC."""
    return FakeClock(T0)


@pytest.fixture
def engine(remote: FakeRemoteStore, store: LocalRecordStore, clock: FakeClock) -> SyncEngine:
    """Engine whose connectivity follows ``remote.online``."""
    return SyncEngine(remote, store, lambda: remote.online, clock=clock)
