"""Scheduler for periodic sync passes and retention sweeps.

This module provides:
- SyncScheduler: Runs reconciliation passes and retention sweeps on
  fixed intervals in a background thread
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from recordsync.client.sync.engine import SyncEngine
    from recordsync.client.sync.types import SyncResult

logger = logging.getLogger(__name__)

DEFAULT_SYNC_INTERVAL = 60.0  # seconds
DEFAULT_SWEEP_INTERVAL = 3600.0  # seconds


class SyncScheduler:
    """Runs engine.sync() and engine.sweep() periodically.

    The sweep runs once when the scheduler starts and the first sync pass
    is due immediately. A sync job never overlaps a running one.
    """

    def __init__(
        self,
        engine: SyncEngine,
        sync_interval: float = DEFAULT_SYNC_INTERVAL,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        on_result: Callable[[SyncResult], None] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            engine: Sync engine to drive.
            sync_interval: Seconds between reconciliation passes.
            sweep_interval: Seconds between retention sweeps.
            on_result: Optional callback receiving each completed pass.
        """
        self._engine = engine
        self._sync_interval = sync_interval
        self._sweep_interval = sweep_interval
        self._on_result = on_result
        self._scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        """True while the scheduler is started."""
        return self._scheduler is not None

    def _sync_job(self) -> None:
        """Job function for scheduled reconciliation."""
        try:
            result = self._engine.sync()
        except Exception:
            logger.exception("Error during scheduled sync pass")
            return
        if result is not None and self._on_result:
            self._on_result(result)

    def _sweep_job(self) -> None:
        """Job function for scheduled retention sweep."""
        try:
            self._engine.sweep()
        except Exception:
            logger.exception("Error during scheduled retention sweep")

    def start(self) -> None:
        """Start the scheduler."""
        if self._scheduler is not None:
            return  # Already running

        self._sweep_job()

        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self._sync_job,
            trigger=IntervalTrigger(seconds=self._sync_interval),
            id="sync_pass",
            name="Reconciliation pass",
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.add_job(
            self._sweep_job,
            trigger=IntervalTrigger(seconds=self._sweep_interval),
            id="retention_sweep",
            name="Retention sweep",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Sync scheduler started (sync every %.0fs, sweep every %.0fs)",
            self._sync_interval,
            self._sweep_interval,
        )

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Sync scheduler stopped")

    def run_now(self) -> None:
        """Run a sync pass and a sweep immediately (manual trigger)."""
        self._sweep_job()
        self._sync_job()
