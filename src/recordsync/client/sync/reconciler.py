"""Reconciliation pass between the local and remote stores.

This module provides:
- Reconciler: Runs one pull / merge-in / push-out cycle

Pass:
    1. Pull      fetch every non-deleted remote record (failure aborts the pass)
    2. Merge-in  adopt newer remote versions, insert unknown ones as SYNCED
    3. Push-out  dispatch each non-SYNCED local record by status

| Status            | Operation          |
|-------------------|--------------------|
| PENDING_CREATE    | create             |
| PENDING_UPDATE    | update             |
| PENDING_DELETE    | soft-delete        |
| PENDING_RECOVERY  | recover            |
| FAILED            | conflict resolver  |

All merges are committed before the first push is dispatched. A failed
push marks that record FAILED and the pass moves on to the next record.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from recordsync.client.api import TransportError
from recordsync.client.domain import Record, SyncStatus
from recordsync.client.sync.types import (
    Connectivity,
    PullError,
    PushResult,
    SyncResult,
)

if TYPE_CHECKING:
    from recordsync.client.api import RemoteStore
    from recordsync.client.state import RecordStore
    from recordsync.client.sync.conflict import ConflictResolver
    from recordsync.client.sync.transfers import RecordPusher

logger = logging.getLogger(__name__)


class Reconciler:
    """Orchestrates reconciliation passes.

    At most one pass runs at a time; a call made while a pass is in
    flight returns immediately without doing anything.
    """

    def __init__(
        self,
        remote: RemoteStore,
        store: RecordStore,
        pusher: RecordPusher,
        resolver: ConflictResolver,
        is_online: Connectivity,
    ) -> None:
        """Initialize the reconciler.

        Args:
            remote: Remote store client.
            store: Local record store.
            pusher: Pusher for create/update/delete/recover.
            resolver: Resolver for FAILED records.
            is_online: Connectivity signal.
        """
        self._remote = remote
        self._store = store
        self._pusher = pusher
        self._resolver = resolver
        self._is_online = is_online
        self._in_flight = threading.Lock()

    @property
    def is_syncing(self) -> bool:
        """True while a pass is running."""
        return self._in_flight.locked()

    def run_sync_pass(self) -> SyncResult | None:
        """Run one reconciliation pass.

        Returns:
            SyncResult, or None if a pass was already running or the
            client is offline.

        Raises:
            PullError: If the remote snapshot could not be fetched.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Sync pass already running, skipping")
            return None
        try:
            if not self._is_online():
                logger.debug("Offline, sync pass skipped")
                return None
            return self._run()
        finally:
            self._in_flight.release()

    def _run(self) -> SyncResult:
        result = SyncResult()

        try:
            remote_records = self._remote.fetch_all()
        except TransportError as e:
            logger.error(f"Pull failed, aborting sync pass: {e}")
            raise PullError(str(e)) from e

        self.merge(remote_records, result)
        self.push_pending(result)

        logger.info(
            f"Sync pass complete: pulled={result.pulled}, merged={result.merged}, "
            f"pushed={result.pushed}, failed={len(result.failed)}"
        )
        return result

    def merge(self, remote_records: list[Record], result: SyncResult) -> None:
        """Merge a remote snapshot into the local store (last writer wins).

        Args:
            remote_records: Records fetched from the remote store.
            result: Result to update with pulled/merged counts.
        """
        for remote_record in remote_records:
            with self._store.transaction():
                local = self._store.get(remote_record.id)
                if local is None:
                    remote_record.set_sync_status(SyncStatus.SYNCED)
                    self._store.insert(remote_record)
                    result.pulled += 1
                elif remote_record.updated_at > local.updated_at:
                    local.adopt(remote_record)
                    local.set_sync_status(SyncStatus.SYNCED)
                    self._store.save(local)
                    result.merged += 1

    def push_pending(self, result: SyncResult) -> None:
        """Dispatch every non-SYNCED local record to its remote operation.

        Args:
            result: Result to update with pushed/failed counts and errors.
        """
        for record in self._store.list_unsynced():
            push_result = self.dispatch(record)
            if push_result is None:
                continue
            if push_result.synced:
                result.pushed += 1
            elif push_result.error is not None:
                result.failed.append(record.id)
                result.errors.append(push_result.error)

    def dispatch(self, record: Record) -> PushResult | None:
        """Run the remote operation matching the record's status.

        Returns:
            The push result, or None when nothing was attempted.
        """
        status = record.sync_status
        if status is SyncStatus.PENDING_CREATE:
            return self._pusher.push_create(record)
        if status is SyncStatus.PENDING_UPDATE:
            return self._pusher.push_update(record)
        if status is SyncStatus.PENDING_DELETE:
            return self._pusher.push_delete(record)
        if status is SyncStatus.PENDING_RECOVERY:
            return self._pusher.push_recover(record)
        if status is SyncStatus.FAILED:
            return self._resolver.resolve(record)
        return None
