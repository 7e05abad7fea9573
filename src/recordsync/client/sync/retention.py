"""Retention sweep for soft-deleted records.

Soft-deleted records stay in the local store (and in the trash listing)
for RETENTION_WINDOW after deletion, then are removed permanently. The
sweep is local only: remote soft-deletes are never purged from here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from recordsync.client.state import LocalStoreError
from recordsync.client.sync.types import Clock
from recordsync.core.types import utc_now

if TYPE_CHECKING:
    from recordsync.client.state import RecordStore

logger = logging.getLogger(__name__)

RETENTION_WINDOW = timedelta(days=5)


class RetentionSweeper:
    """Purges local records whose soft-delete has expired."""

    def __init__(
        self,
        store: RecordStore,
        clock: Clock = utc_now,
        window: timedelta = RETENTION_WINDOW,
    ) -> None:
        self._store = store
        self._clock = clock
        self._window = window

    def sweep(self, now: datetime | None = None) -> int:
        """Remove records soft-deleted before ``now - window``.

        Store failures are skipped: retention is best-effort and a
        missed record is picked up by the next sweep.

        Args:
            now: Reference time (defaults to the sweeper's clock).

        Returns:
            Number of records removed.
        """
        cutoff = (now or self._clock()) - self._window

        try:
            expired = self._store.list_expired(cutoff)
        except LocalStoreError as e:
            logger.debug(f"Retention sweep skipped, query failed: {e}")
            return 0

        purged = 0
        for candidate in expired:
            try:
                if self._purge(candidate.id, cutoff):
                    purged += 1
            except LocalStoreError as e:
                logger.debug(f"Could not purge {candidate.id}: {e}")

        if purged > 0:
            logger.info(f"Retention sweep: {purged} records purged (deleted before {cutoff:%Y-%m-%d %H:%M})")
        else:
            logger.debug(f"Retention sweep: nothing older than {self._window}")
        return purged

    def _purge(self, record_id: str, cutoff: datetime) -> bool:
        """Delete a record if it is still soft-deleted before ``cutoff``.

        The record is re-read under the store transaction so a recover or
        merge that landed after the query keeps it alive.
        """
        with self._store.transaction():
            record = self._store.get(record_id)
            if record is None or record.deleted_at is None or record.deleted_at >= cutoff:
                logger.debug(f"Skipping purge of {record_id}: no longer expired")
                return False
            self._store.delete(record_id)
            return True
