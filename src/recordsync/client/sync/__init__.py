"""Record synchronization between the local store and the remote store.

Architecture:
    SyncEngine → Reconciler → RecordPusher / ConflictResolver

Components:
- **SyncEngine**: Entry point for mutations, passes and sweeps
- **Reconciler**: One pull / merge-in / push-out cycle, never overlapping
- **RecordPusher**: create/update/delete/recover for a single record
- **ConflictResolver**: Re-probes the remote copy of FAILED records
- **RetentionSweeper**: Purges soft-deleted records after the window
- **SyncScheduler**: Runs passes and sweeps on intervals
"""

from recordsync.client.sync.conflict import ConflictResolver
from recordsync.client.sync.engine import SyncEngine
from recordsync.client.sync.reconciler import Reconciler
from recordsync.client.sync.retention import RETENTION_WINDOW, RetentionSweeper
from recordsync.client.sync.scheduler import (
    DEFAULT_SWEEP_INTERVAL,
    DEFAULT_SYNC_INTERVAL,
    SyncScheduler,
)
from recordsync.client.sync.transfers import RecordPusher
from recordsync.client.sync.types import (
    Clock,
    Connectivity,
    ErrorCallback,
    PullError,
    PushOutcome,
    PushResult,
    RecordNotFoundError,
    SyncError,
    SyncResult,
)

__all__ = [
    # Constants
    "DEFAULT_SWEEP_INTERVAL",
    "DEFAULT_SYNC_INTERVAL",
    "RETENTION_WINDOW",
    # Types and dataclasses
    "Clock",
    "Connectivity",
    "ErrorCallback",
    "PullError",
    "PushOutcome",
    "PushResult",
    "RecordNotFoundError",
    "SyncError",
    "SyncResult",
    # Engine
    "SyncEngine",
    "Reconciler",
    # Transfers and conflicts
    "ConflictResolver",
    "RecordPusher",
    # Retention and scheduling
    "RetentionSweeper",
    "SyncScheduler",
]
