"""Shared types for recordsync.

This module defines types, enums and time helpers used across the client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


class SyncError(Exception):
    """Base exception for recordsync errors."""


class SyncState(str, Enum):
    """Overall state of the sync engine."""

    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"
    OFFLINE = "offline"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. PostgREST may return a trailing
    ``Z`` which older interpreters do not accept, so it is normalized.

    Args:
        value: ISO string, datetime, or None.

    Returns:
        Aware datetime in UTC, or None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    """Format a datetime as an ISO-8601 UTC string (None passes through)."""
    if value is None:
        return None
    return parse_timestamp(value).isoformat(timespec="microseconds")  # type: ignore[union-attr]
