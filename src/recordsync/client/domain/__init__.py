"""Domain modules for sync business rules.

This package centralizes business logic for the sync system:
- status: Sync-status state machine and its timestamp side effects
- records: The Record model

Architecture:
    domain/ contains pure business logic without external dependencies.
    Implementation details (store writes, API calls) stay outside.
"""

from recordsync.client.domain.records import Record
from recordsync.client.domain.status import SyncStatus, transition_timestamps

__all__ = [
    # records
    "Record",
    # status
    "SyncStatus",
    "transition_timestamps",
]
