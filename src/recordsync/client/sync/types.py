"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, PullError, RecordNotFoundError: Exception classes
- PushOutcome, PushResult: Result of pushing one record
- SyncResult: Overall reconciliation pass result
- Type aliases for callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from recordsync.core.types import SyncError


class PullError(SyncError):
    """Fetching the remote snapshot failed; the pass was aborted."""


class RecordNotFoundError(SyncError):
    """No local record with the requested id."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"No record with id {record_id}")


class PushOutcome(Enum):
    """What happened to a record after a remote operation."""

    SYNCED = auto()  # Remote accepted the local version
    ADOPTED_REMOTE = auto()  # Remote version was newer and replaced local
    FAILED = auto()  # Remote call failed, record is now FAILED
    SUPERSEDED = auto()  # Record changed locally while the call was in flight
    MISSING = auto()  # Record was purged locally while the call was in flight


@dataclass
class PushResult:
    """Result of pushing one record.

    Attributes:
        record_id: Record identifier.
        outcome: What happened to the record.
        error: User-facing error message when the remote call failed.
    """

    record_id: str
    outcome: PushOutcome
    error: str | None = None

    @property
    def synced(self) -> bool:
        """True if the record ended in SYNCED."""
        return self.outcome in (PushOutcome.SYNCED, PushOutcome.ADOPTED_REMOTE)


@dataclass
class SyncResult:
    """Result of a reconciliation pass.

    Attributes:
        pulled: Remote records inserted locally.
        merged: Local records that adopted a newer remote version.
        pushed: Records settled as SYNCED during the push phase.
        failed: Ids of records that ended the pass in FAILED.
        errors: Error messages collected during the pass.
        aborted: True if the pull failed and nothing was pushed.
    """

    pulled: int = 0
    merged: int = 0
    pushed: int = 0
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def success(self) -> bool:
        """True if the pass completed without errors."""
        return not self.errors and not self.aborted


# Type alias for error reporting callback
ErrorCallback = Callable[[str], None]

# Type alias for the connectivity signal
Connectivity = Callable[[], bool]

# Type alias for an injectable clock
Clock = Callable[[], datetime]
