"""Conflict resolution for records whose last remote operation failed.

A FAILED record may have diverged from the remote store while it was
offline. The resolver re-probes the remote copy and picks a side by
``updated_at`` (last writer wins):

| Remote copy                        | Action                                  |
|------------------------------------|-----------------------------------------|
| none                               | PENDING_CREATE, then create             |
| remote.updated_at > local          | adopt remote fields, SYNCED             |
| remote.updated_at <= local         | PENDING_UPDATE, then update             |
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from recordsync.client.api import TransportError
from recordsync.client.domain import Record, SyncStatus
from recordsync.client.sync.types import (
    Clock,
    Connectivity,
    ErrorCallback,
    PushOutcome,
    PushResult,
)
from recordsync.core.types import utc_now

if TYPE_CHECKING:
    from recordsync.client.api import RemoteStore
    from recordsync.client.state import RecordStore
    from recordsync.client.sync.transfers import RecordPusher

logger = logging.getLogger(__name__)


class ConflictResolver:
    """Recovers records stuck in the FAILED state."""

    def __init__(
        self,
        remote: RemoteStore,
        store: RecordStore,
        pusher: RecordPusher,
        is_online: Connectivity,
        clock: Clock = utc_now,
        on_error: ErrorCallback | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            remote: Remote store client.
            store: Local record store.
            pusher: Pusher used for the create and update paths.
            is_online: Connectivity signal.
            clock: Time source for the PENDING_UPDATE stamp.
            on_error: Optional callback receiving user-facing error messages.
        """
        self._remote = remote
        self._store = store
        self._pusher = pusher
        self._is_online = is_online
        self._clock = clock
        self._on_error = on_error

    def resolve(self, record: Record) -> PushResult | None:
        """Resolve a FAILED record against the remote store.

        Args:
            record: The failed record.

        Returns:
            The outcome, or None if the record is not FAILED or the
            client is offline.
        """
        if record.sync_status is not SyncStatus.FAILED:
            logger.debug(f"Record {record.id} is {record.sync_status.name}, nothing to resolve")
            return None
        if not self._is_online():
            logger.debug(f"Offline, cannot resolve {record.id}")
            return None

        try:
            remote_record = self._remote.fetch_one(record.id)
        except TransportError as e:
            logger.warning(f"Could not probe remote copy of {record.id}: {e}")
            if self._on_error:
                self._on_error(str(e))
            return PushResult(record.id, PushOutcome.FAILED, error=str(e))

        if remote_record is None:
            logger.info(f"Record {record.id} missing on remote, recreating")
            return self._retry(record, SyncStatus.PENDING_CREATE)

        if remote_record.updated_at > record.updated_at:
            logger.info(f"Remote copy of {record.id} is newer, adopting it")
            return self._adopt(record, remote_record)

        logger.info(f"Local copy of {record.id} is newer, pushing it")
        return self._retry(record, SyncStatus.PENDING_UPDATE)

    def _adopt(self, record: Record, remote_record: Record) -> PushResult:
        with self._store.transaction():
            current = self._store.get(record.id)
            if current is None:
                return PushResult(record.id, PushOutcome.MISSING)
            if current.snapshot() != record.snapshot():
                return PushResult(record.id, PushOutcome.SUPERSEDED)
            current.adopt(remote_record)
            current.set_sync_status(SyncStatus.SYNCED)
            self._store.save(current)
        return PushResult(record.id, PushOutcome.ADOPTED_REMOTE)

    def _retry(self, record: Record, status: SyncStatus) -> PushResult:
        with self._store.transaction():
            current = self._store.get(record.id)
            if current is None:
                return PushResult(record.id, PushOutcome.MISSING)
            if current.snapshot() != record.snapshot():
                return PushResult(record.id, PushOutcome.SUPERSEDED)
            current.set_sync_status(status, now=self._clock())
            self._store.save(current)
        if status is SyncStatus.PENDING_CREATE:
            return self._pusher.push_create(current)
        return self._pusher.push_update(current)
