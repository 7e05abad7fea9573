"""HTTP client for the remote record store.

This module provides:
- RemoteStore: The interface the sync engine consumes
- SupabaseClient: PostgREST implementation of RemoteStore over httpx
- TransportError: Raised for any failed remote operation
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx

from recordsync.client.domain import Record
from recordsync.core.config import RemoteConfig
from recordsync.core.types import SyncError, format_timestamp

logger = logging.getLogger(__name__)


class TransportError(SyncError):
    """A remote operation failed (network or backend error).

    The message is suitable for display to the user. A failed operation
    leaves the remote record unchanged.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteStore(Protocol):
    """CRUD surface against the authoritative store.

    Every operation is idempotent when retried with the same payload and
    raises TransportError on failure.
    """

    def fetch_all(self) -> list[Record]: ...

    def fetch_one(self, record_id: str) -> Record | None: ...

    def create(self, record: Record) -> Record: ...

    def update(self, record: Record) -> Record: ...

    def soft_delete(self, record_id: str, deleted_at: datetime) -> Record: ...

    def health_check(self) -> bool: ...


class SupabaseClient:
    """PostgREST client for the ``records`` table."""

    def __init__(
        self,
        config: RemoteConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Remote configuration with URL, key, and settings.
            transport: Optional httpx transport (used by tests).
        """
        self._config = config
        self._table = config.table
        self._client = httpx.Client(
            base_url=config.rest_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "apikey": config.api_key,
                "Authorization": f"Bearer {config.api_key}",
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> SupabaseClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        """Send a request to the table endpoint and map failures."""
        try:
            response = self._client.request(method, f"/{self._table}", **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to remote store timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Cannot reach remote store: {e}") from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Handle API response and raise TransportError on failure."""
        if response.status_code in (401, 403):
            raise TransportError("Invalid or expired API key", response.status_code)
        if response.status_code >= 400:
            detail = "Unknown error"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                detail = body.get("message") or body.get("hint") or detail
            raise TransportError(
                f"Remote store error ({response.status_code}): {detail}",
                response.status_code,
            )
        return response

    def _single(self, response: httpx.Response, record_id: str) -> Record:
        """Extract the one row returned with ``Prefer: return=representation``."""
        rows = self._rows(response)
        if not rows:
            raise TransportError(f"Record {record_id} not found on remote store", 404)
        return rows[0]

    def _rows(self, response: httpx.Response) -> list[Record]:
        """Decode a JSON array of rows and raise TransportError if it is malformed."""
        try:
            rows = response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid response from remote store: {e}", response.status_code
            ) from e
        if not isinstance(rows, list):
            raise TransportError(
                "Invalid response from remote store: expected a list of rows",
                response.status_code,
            )
        try:
            return [Record.from_remote(row) for row in rows]
        except (ValueError, KeyError, TypeError) as e:
            raise TransportError(f"Malformed row from remote store: {e!r}") from e

    # === Health check ===

    def health_check(self) -> bool:
        """Check if the remote store is reachable.

        Returns:
            True if the REST endpoint answers.
        """
        try:
            response = self._client.get("/")
            return response.status_code == 200
        except httpx.RequestError:
            return False

    # === Record operations ===

    def fetch_all(self) -> list[Record]:
        """Fetch all non-deleted records.

        Returns:
            Records as stored remotely (status SYNCED).
        """
        response = self._request(
            "GET", params={"select": "*", "deleted_at": "is.null"}
        )
        return self._rows(response)

    def fetch_one(self, record_id: str) -> Record | None:
        """Fetch a record by id, deleted or not.

        Args:
            record_id: Record identifier.

        Returns:
            The record, or None if the remote has no such row.
        """
        response = self._request(
            "GET", params={"select": "*", "id": f"eq.{record_id}"}
        )
        rows = self._rows(response)
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(f"Remote returned {len(rows)} rows for id {record_id}")
        return rows[0]

    def create(self, record: Record) -> Record:
        """Insert a record.

        Retrying after an ambiguous failure is safe: the insert is an
        upsert on the primary key.

        Args:
            record: Record to insert.

        Returns:
            The record as stored remotely.
        """
        response = self._request(
            "POST",
            json=record.to_remote(),
            headers={
                "Prefer": "return=representation,resolution=merge-duplicates",
            },
        )
        return self._single(response, record.id)

    def update(self, record: Record) -> Record:
        """Replace the content of a record, including its deleted_at.

        Args:
            record: Local version to push.

        Returns:
            The record as stored remotely.
        """
        payload = record.to_remote()
        del payload["id"]
        response = self._request(
            "PATCH",
            params={"id": f"eq.{record.id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        return self._single(response, record.id)

    def soft_delete(self, record_id: str, deleted_at: datetime) -> Record:
        """Set deleted_at on a record, leaving its content untouched.

        Args:
            record_id: Record identifier.
            deleted_at: Soft-delete timestamp.

        Returns:
            The record as stored remotely.
        """
        response = self._request(
            "PATCH",
            params={"id": f"eq.{record_id}"},
            json={"deleted_at": format_timestamp(deleted_at)},
            headers={"Prefer": "return=representation"},
        )
        return self._single(response, record_id)
