"""Connectivity signal for the sync engine.

The engine only needs a ``Callable[[], bool]``. ConnectivityMonitor
derives it from the remote store's health check, caching the answer so
that every mutation does not pay for a probe.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recordsync.client.api import RemoteStore

logger = logging.getLogger(__name__)

DEFAULT_TTL = 10.0  # seconds a probe result stays valid


class ConnectivityMonitor:
    """Cached reachability probe for the remote store.

    Usage:
        monitor = ConnectivityMonitor(client)
        if monitor():
            ...

    ``force(False)`` pins the signal (e.g. an explicit offline mode);
    ``force(None)`` returns to probing.
    """

    def __init__(self, remote: RemoteStore, ttl: float = DEFAULT_TTL) -> None:
        self._remote = remote
        self._ttl = ttl
        self._lock = threading.Lock()
        self._forced: bool | None = None
        self._cached: bool | None = None
        self._checked_at = 0.0

    def __call__(self) -> bool:
        """Return True if the remote store is believed reachable."""
        with self._lock:
            if self._forced is not None:
                return self._forced
            now = time.monotonic()
            if self._cached is not None and now - self._checked_at < self._ttl:
                return self._cached

            online = self._remote.health_check()
            if online != self._cached:
                logger.info("Remote store is %s", "reachable" if online else "unreachable")
            self._cached = online
            self._checked_at = now
            return online

    def force(self, online: bool | None) -> None:
        """Pin the signal to ``online``, or resume probing with None."""
        with self._lock:
            self._forced = online

    def invalidate(self) -> None:
        """Drop the cached probe result."""
        with self._lock:
            self._cached = None
