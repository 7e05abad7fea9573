"""Record model.

A record is the unit of synchronization. Its sync status can only be
changed through :meth:`Record.set_sync_status`, which owns the timestamp
side effects described in :mod:`recordsync.client.domain.status`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from recordsync.client.domain.status import SyncStatus, transition_timestamps
from recordsync.core.types import format_timestamp, parse_timestamp, utc_now


@dataclass
class Record:
    """A synchronized record.

    Attributes:
        id: Opaque unique identifier, assigned at local creation.
        title: Text content.
        completed: Completion flag.
        created_at: Creation time (immutable).
        updated_at: Last content mutation; the sole conflict tie-breaker.
        deleted_at: Soft-delete time, None unless soft-deleted.
    """

    id: str
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    _sync_status: SyncStatus = field(default=SyncStatus.PENDING_CREATE, repr=False)

    @classmethod
    def new(cls, title: str, now: datetime | None = None) -> Record:
        """Create a new local record awaiting its first push."""
        now = now or utc_now()
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_remote(cls, data: dict[str, Any]) -> Record:
        """Create from a remote row (snake_case keys); the result is SYNCED."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            completed=bool(data["completed"]),
            created_at=parse_timestamp(data["created_at"]),  # type: ignore[arg-type]
            updated_at=parse_timestamp(data["updated_at"]),  # type: ignore[arg-type]
            deleted_at=parse_timestamp(data.get("deleted_at")),
            _sync_status=SyncStatus.SYNCED,
        )

    def to_remote(self) -> dict[str, Any]:
        """Serialize to the remote row representation.

        The sync status is local bookkeeping and is never sent.
        """
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "deleted_at": format_timestamp(self.deleted_at),
        }

    @property
    def sync_status(self) -> SyncStatus:
        """Outstanding remote operation for this record."""
        return self._sync_status

    @property
    def is_deleted(self) -> bool:
        """True if the record is soft-deleted."""
        return self.deleted_at is not None

    def set_sync_status(self, status: SyncStatus, now: datetime | None = None) -> None:
        """Move the record to ``status``, applying the timestamp side effects.

        Args:
            status: Target status.
            now: Current time (defaults to the wall clock).
        """
        self.updated_at, self.deleted_at = transition_timestamps(
            status, self.updated_at, self.deleted_at, now or utc_now()
        )
        self._sync_status = status

    def adopt(self, other: Record) -> None:
        """Take the state of a newer version of this record (whole-record LWW)."""
        self.title = other.title
        self.completed = other.completed
        self.updated_at = other.updated_at
        self.deleted_at = other.deleted_at

    def snapshot(self) -> tuple[object, ...]:
        """Return the fields that identify this local version."""
        return (
            self._sync_status,
            self.title,
            self.completed,
            self.updated_at,
            self.deleted_at,
        )
