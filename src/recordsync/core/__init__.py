"""Core module - Shared configuration, types and time helpers."""

from recordsync.core.config import RemoteConfig
from recordsync.core.types import (
    SyncError,
    SyncState,
    format_timestamp,
    parse_timestamp,
    utc_now,
)

__all__ = [
    # Config
    "RemoteConfig",
    # Types
    "SyncError",
    "SyncState",
    # Time helpers
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
