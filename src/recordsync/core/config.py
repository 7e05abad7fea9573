"""Shared configuration classes for recordsync.

This module defines the configuration used to reach the remote record store.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RemoteConfig:
    """Configuration for connecting to the remote record store.

    The remote is a PostgREST endpoint (as exposed by Supabase), reached
    through its ``/rest/v1`` prefix.

    Attributes:
        url: Base URL of the project (e.g., "https://abc.supabase.co").
        api_key: API key sent as both ``apikey`` and bearer token.
        table: Name of the remote table holding records.
        timeout: Request timeout in seconds.
    """

    url: str
    api_key: str
    table: str = "records"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        """Normalize base URL."""
        self.url = self.url.rstrip("/")

    @property
    def rest_url(self) -> str:
        """Get the PostgREST base URL.

        Returns:
            URL of the REST prefix, without trailing slash.
        """
        return f"{self.url}/rest/v1"

    @property
    def is_secure(self) -> bool:
        """Check if using HTTPS.

        Returns:
            True if the remote uses HTTPS.
        """
        return self.url.startswith("https://")
