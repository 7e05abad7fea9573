"""Remote push paths for individual records.

This module provides:
- RecordPusher: Runs create/update/delete/recover against the remote store
  and settles the resulting sync status in the local store

Every push follows the same three steps:
1. Snapshot the local version (status + timestamps).
2. Call the remote store, with no local lock held.
3. Settle under the store transaction: if the record still matches the
   snapshot it becomes SYNCED (or FAILED); if it changed in the meantime
   the newer local state is left pending; if it is gone nothing is written.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from recordsync.client.api import TransportError
from recordsync.client.domain import Record, SyncStatus
from recordsync.client.sync.types import ErrorCallback, PushOutcome, PushResult

if TYPE_CHECKING:
    from recordsync.client.api import RemoteStore
    from recordsync.client.state import RecordStore

logger = logging.getLogger(__name__)


class RecordPusher:
    """Pushes local records to the remote store."""

    def __init__(
        self,
        remote: RemoteStore,
        store: RecordStore,
        on_error: ErrorCallback | None = None,
    ) -> None:
        """Initialize the pusher.

        Args:
            remote: Remote store client.
            store: Local record store.
            on_error: Optional callback receiving user-facing error messages.
        """
        self._remote = remote
        self._store = store
        self._on_error = on_error

    def push_create(self, record: Record) -> PushResult:
        """Create the record on the remote store."""
        return self._push(record, "create", lambda: self._remote.create(record))

    def push_update(self, record: Record) -> PushResult:
        """Push the record's content to the remote store."""
        return self._push(record, "update", lambda: self._remote.update(record))

    def push_delete(self, record: Record) -> PushResult:
        """Propagate a soft-delete to the remote store."""
        if record.deleted_at is None:
            raise ValueError(f"Record {record.id} is not soft-deleted")
        deleted_at = record.deleted_at
        return self._push(
            record, "delete", lambda: self._remote.soft_delete(record.id, deleted_at)
        )

    def push_recover(self, record: Record) -> PushResult:
        """Clear the remote soft-delete by pushing the recovered record."""
        return self._push(record, "recover", lambda: self._remote.update(record))

    def _push(
        self,
        record: Record,
        operation: str,
        call: Callable[[], Any],
    ) -> PushResult:
        snapshot = record.snapshot()
        try:
            call()
        except TransportError as e:
            logger.warning(f"Remote {operation} failed for {record.id}: {e}")
            outcome = self.settle(record.id, snapshot, SyncStatus.FAILED)
            if self._on_error:
                self._on_error(str(e))
            return PushResult(record.id, outcome, error=str(e))

        logger.debug(f"Remote {operation} succeeded for {record.id}")
        return PushResult(record.id, self.settle(record.id, snapshot, SyncStatus.SYNCED))

    def settle(
        self,
        record_id: str,
        snapshot: tuple[Any, ...],
        status: SyncStatus,
    ) -> PushOutcome:
        """Set ``status`` on the stored record if it still matches ``snapshot``.

        Args:
            record_id: Record identifier.
            snapshot: Result of ``Record.snapshot()`` taken before the call.
            status: SYNCED or FAILED.

        Returns:
            The outcome actually applied.
        """
        with self._store.transaction():
            current = self._store.get(record_id)
            if current is None:
                logger.debug(f"Record {record_id} was purged during push")
                return PushOutcome.MISSING
            if current.snapshot() != snapshot:
                logger.debug(f"Record {record_id} changed during push, leaving it pending")
                return PushOutcome.SUPERSEDED
            current.set_sync_status(status)
            self._store.save(current)

        if status is SyncStatus.SYNCED:
            return PushOutcome.SYNCED
        return PushOutcome.FAILED
