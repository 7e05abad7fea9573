"""Sync engine coordinating local mutations and reconciliation.

This module provides:
- SyncEngine: Entry point for user actions (add/edit/delete/recover),
  reconciliation passes, conflict resolution and retention sweeps

Every mutation commits to the local store first. When the client is
online the matching remote operation follows immediately; otherwise the
record stays pending until the next pass.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from recordsync.client.domain import Record, SyncStatus
from recordsync.client.notifications import ErrorNotice
from recordsync.client.sync.conflict import ConflictResolver
from recordsync.client.sync.reconciler import Reconciler
from recordsync.client.sync.retention import RetentionSweeper
from recordsync.client.sync.transfers import RecordPusher
from recordsync.client.sync.types import (
    Clock,
    Connectivity,
    PullError,
    PushResult,
    RecordNotFoundError,
    SyncResult,
)
from recordsync.core.types import SyncState, utc_now

if TYPE_CHECKING:
    from recordsync.client.api import RemoteStore
    from recordsync.client.state import RecordStore

logger = logging.getLogger(__name__)


class SyncEngine:
    """Coordinates record mutations and synchronization."""

    def __init__(
        self,
        remote: RemoteStore,
        store: RecordStore,
        is_online: Connectivity,
        clock: Clock = utc_now,
        notice: ErrorNotice | None = None,
    ) -> None:
        """Initialize the sync engine.

        Args:
            remote: Remote store client.
            store: Local record store.
            is_online: Connectivity signal.
            clock: Time source for timestamps and retention.
            notice: Where user-facing errors are posted.
        """
        self._store = store
        self._is_online = is_online
        self._clock = clock
        self._notice = notice or ErrorNotice()

        self._pusher = RecordPusher(remote, store, on_error=self._notice.post)
        self._resolver = ConflictResolver(
            remote, store, self._pusher, is_online, clock=clock, on_error=self._notice.post
        )
        self._reconciler = Reconciler(remote, store, self._pusher, self._resolver, is_online)
        self._sweeper = RetentionSweeper(store, clock=clock)

    @property
    def notice(self) -> ErrorNotice:
        """Most recent user-facing error."""
        return self._notice

    @property
    def reconciler(self) -> Reconciler:
        """The reconciler driving full passes."""
        return self._reconciler

    @property
    def state(self) -> SyncState:
        """Overall engine state."""
        if self._reconciler.is_syncing:
            return SyncState.SYNCING
        if self._notice.pending:
            return SyncState.ERROR
        if not self._is_online():
            return SyncState.OFFLINE
        return SyncState.IDLE

    # === Queries ===

    def get(self, record_id: str) -> Record:
        """Get a record by id.

        Raises:
            RecordNotFoundError: If no such record exists locally.
        """
        record = self._store.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def active(self) -> list[Record]:
        """Non-deleted records, newest first."""
        return self._store.list_active()

    def trash(self) -> list[Record]:
        """Soft-deleted records, newest first."""
        return self._store.list_trash()

    def counts(self) -> dict[SyncStatus, int]:
        """Number of records per sync status."""
        return self._store.count_by_status()

    # === Mutations ===

    def add(self, title: str) -> Record:
        """Create a record locally and push it when online.

        Args:
            title: Record title.

        Returns:
            The record as stored after any push.
        """
        record = Record.new(_clean_title(title), now=self._clock())
        self._store.insert(record)
        logger.debug(f"Created record {record.id}")
        self._push_if_online(record)
        return self.get(record.id)

    def edit(
        self,
        record_id: str,
        title: str | None = None,
        completed: bool | None = None,
    ) -> Record:
        """Change a record's content and push it when online.

        Args:
            record_id: Record identifier.
            title: New title, or None to keep it.
            completed: New completion flag, or None to keep it.
        """
        with self._store.transaction():
            record = self.get(record_id)
            if title is not None:
                record.title = _clean_title(title)
            if completed is not None:
                record.completed = completed
            self._mark(record, SyncStatus.PENDING_UPDATE)
        self._push_if_online(record)
        return self.get(record_id)

    def delete(self, record_id: str) -> Record:
        """Soft-delete a record and push the deletion when online."""
        with self._store.transaction():
            record = self.get(record_id)
            if record.is_deleted:
                return record
            self._mark(record, SyncStatus.PENDING_DELETE)
        self._push_if_online(record)
        return self.get(record_id)

    def recover(self, record_id: str) -> Record:
        """Restore a soft-deleted record and push it when online."""
        with self._store.transaction():
            record = self.get(record_id)
            if not record.is_deleted:
                return record
            self._mark(record, SyncStatus.PENDING_RECOVERY)
        self._push_if_online(record)
        return self.get(record_id)

    def resolve(self, record_id: str) -> PushResult | None:
        """Run the conflict resolver on a FAILED record."""
        return self._resolver.resolve(self.get(record_id))

    def _mark(self, record: Record, status: SyncStatus) -> None:
        # A record the remote has never seen stays PENDING_CREATE; the
        # create carries its latest content and deleted_at.
        unpublished = record.sync_status is SyncStatus.PENDING_CREATE
        record.set_sync_status(status, now=self._clock())
        if unpublished:
            record.set_sync_status(SyncStatus.PENDING_CREATE)
        self._store.save(record)

    def _push_if_online(self, record: Record) -> PushResult | None:
        if not self._is_online():
            logger.debug(f"Offline, {record.id} stays {record.sync_status.name}")
            return None
        return self._reconciler.dispatch(record)

    # === Sync and retention ===

    def sync(self) -> SyncResult | None:
        """Run a reconciliation pass.

        Returns:
            SyncResult (``aborted`` if the pull failed), or None when the
            pass was skipped (offline or already running).
        """
        try:
            return self._reconciler.run_sync_pass()
        except PullError as e:
            self._notice.post(str(e))
            return SyncResult(errors=[str(e)], aborted=True)

    def sweep(self) -> int:
        """Purge expired soft-deletes from the local store."""
        return self._sweeper.sweep()


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValueError("Title must not be empty")
    return title
