"""Sync-status state machine.

States:
    PENDING_CREATE ──► SYNCED ──► PENDING_UPDATE ──► SYNCED
                              ──► PENDING_DELETE ──► SYNCED ──► PENDING_RECOVERY ──► SYNCED
    any pending    ──► FAILED ──► (resolved) PENDING_CREATE / PENDING_UPDATE / SYNCED

SYNCED is re-enterable. Timestamp side effects of a transition:

| Target            | updated_at | deleted_at |
|-------------------|------------|------------|
| PENDING_UPDATE    | now        | unchanged  |
| PENDING_DELETE    | unchanged  | now        |
| PENDING_RECOVERY  | unchanged  | cleared    |
| anything else     | unchanged  | unchanged  |
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum


class SyncStatus(IntEnum):
    """Outstanding remote operation for a record.

    Values are the integer codes persisted in the local ``sync_status``
    column and must not be renumbered.
    """

    SYNCED = 0
    PENDING_CREATE = 1
    PENDING_UPDATE = 2
    PENDING_DELETE = 3
    PENDING_RECOVERY = 4
    FAILED = 5

    @property
    def is_pending(self) -> bool:
        """True when a remote operation is still outstanding."""
        return self is not SyncStatus.SYNCED

    @property
    def label(self) -> str:
        """Short human label for listings."""
        return _LABELS[self]


_LABELS: dict[SyncStatus, str] = {
    SyncStatus.SYNCED: "synced",
    SyncStatus.PENDING_CREATE: "pending create",
    SyncStatus.PENDING_UPDATE: "pending update",
    SyncStatus.PENDING_DELETE: "pending delete",
    SyncStatus.PENDING_RECOVERY: "pending recovery",
    SyncStatus.FAILED: "failed",
}


def transition_timestamps(
    status: SyncStatus,
    updated_at: datetime,
    deleted_at: datetime | None,
    now: datetime,
) -> tuple[datetime, datetime | None]:
    """Compute the timestamps a record carries after entering ``status``.

    ``updated_at`` never moves backwards, even if the clock does.

    Args:
        status: Target status.
        updated_at: Current updated_at of the record.
        deleted_at: Current deleted_at of the record.
        now: Current time.

    Returns:
        (updated_at, deleted_at) after the transition.
    """
    if status is SyncStatus.PENDING_UPDATE:
        return max(now, updated_at), deleted_at
    if status is SyncStatus.PENDING_DELETE:
        return updated_at, now
    if status is SyncStatus.PENDING_RECOVERY:
        return updated_at, None
    return updated_at, deleted_at
