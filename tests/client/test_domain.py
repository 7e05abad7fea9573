"""Tests for the record model and the sync-status state machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from recordsync.client.domain import Record, SyncStatus, transition_timestamps

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
T1 = T0 + timedelta(minutes=5)


def make_record(**overrides: object) -> Record:
    """Create a SYNCED record at T0."""
    fields: dict[str, object] = {
        "id": "rec-1",
        "title": "Buy milk",
        "completed": False,
        "created_at": T0,
        "updated_at": T0,
        "_sync_status": SyncStatus.SYNCED,
    }
    fields.update(overrides)
    return Record(**fields)  # type: ignore[arg-type]


class TestSyncStatus:
    """Tests for SyncStatus codes and helpers."""

    def test_persisted_codes(self) -> None:
        """Codes must match what is stored in the sync_status column."""
        assert [int(s) for s in SyncStatus] == [0, 1, 2, 3, 4, 5]
        assert SyncStatus(0) is SyncStatus.SYNCED
        assert SyncStatus(5) is SyncStatus.FAILED

    def test_is_pending(self) -> None:
        """Only SYNCED has nothing outstanding."""
        assert not SyncStatus.SYNCED.is_pending
        assert SyncStatus.PENDING_CREATE.is_pending
        assert SyncStatus.FAILED.is_pending

    def test_labels(self) -> None:
        """Every status has a human label."""
        assert SyncStatus.PENDING_RECOVERY.label == "pending recovery"
        assert all(s.label for s in SyncStatus)


class TestTransitionTimestamps:
    """Tests for the timestamp side effects of transitions."""

    def test_pending_update_stamps_updated_at(self) -> None:
        """PENDING_UPDATE sets updated_at to now."""
        assert transition_timestamps(SyncStatus.PENDING_UPDATE, T0, None, T1) == (T1, None)

    def test_pending_update_never_moves_backwards(self) -> None:
        """A clock behind updated_at keeps the newer value."""
        assert transition_timestamps(SyncStatus.PENDING_UPDATE, T1, None, T0) == (T1, None)

    def test_pending_delete_sets_deleted_at(self) -> None:
        """PENDING_DELETE sets deleted_at, leaving updated_at alone."""
        assert transition_timestamps(SyncStatus.PENDING_DELETE, T0, None, T1) == (T0, T1)

    def test_pending_recovery_clears_deleted_at(self) -> None:
        """PENDING_RECOVERY clears deleted_at."""
        assert transition_timestamps(SyncStatus.PENDING_RECOVERY, T0, T1, T1) == (T0, None)

    def test_other_targets_have_no_side_effects(self) -> None:
        """SYNCED, PENDING_CREATE and FAILED leave timestamps unchanged."""
        for status in (SyncStatus.SYNCED, SyncStatus.PENDING_CREATE, SyncStatus.FAILED):
            assert transition_timestamps(status, T0, T1, T1) == (T0, T1)


class TestRecord:
    """Tests for Record."""

    def test_new_record(self) -> None:
        """A new record awaits creation and is not deleted."""
        record = Record.new("Buy milk", now=T0)

        assert record.sync_status is SyncStatus.PENDING_CREATE
        assert record.deleted_at is None
        assert record.created_at == record.updated_at == T0
        assert not record.completed
        assert record.id

    def test_new_records_have_unique_ids(self) -> None:
        """Ids are assigned at creation."""
        assert Record.new("a").id != Record.new("b").id

    def test_from_remote(self) -> None:
        """Remote rows parse into SYNCED records with aware timestamps."""
        record = Record.from_remote({
            "id": "rec-1",
            "title": "Buy milk",
            "completed": True,
            "created_at": "2025-01-01T12:00:00Z",
            "updated_at": "2025-01-01T12:05:00.123456+00:00",
            "deleted_at": None,
        })

        assert record.sync_status is SyncStatus.SYNCED
        assert record.completed is True
        assert record.created_at == T0
        assert record.updated_at == T1.replace(microsecond=123456)
        assert record.deleted_at is None

    def test_to_remote_omits_sync_status(self) -> None:
        """The remote representation never carries sync_status."""
        data = make_record(deleted_at=T1).to_remote()

        assert set(data) == {"id", "title", "completed", "created_at", "updated_at", "deleted_at"}
        assert data["created_at"] == "2025-01-01T12:00:00.000000+00:00"
        assert data["deleted_at"] == "2025-01-01T12:05:00.000000+00:00"

    def test_set_sync_status_applies_side_effects(self) -> None:
        """Transitions go through the timestamp rules."""
        record = make_record()

        record.set_sync_status(SyncStatus.PENDING_DELETE, now=T1)

        assert record.sync_status is SyncStatus.PENDING_DELETE
        assert record.deleted_at == T1
        assert record.is_deleted
        assert record.updated_at == T0

    def test_adopt_takes_remote_state(self) -> None:
        """Adopting copies content, updated_at and deleted_at."""
        local = make_record(title="A", deleted_at=T0)
        remote = make_record(title="B", completed=True, updated_at=T1)

        local.adopt(remote)

        assert local.title == "B"
        assert local.completed is True
        assert local.updated_at == T1
        assert local.deleted_at is None
        assert local.created_at == T0

    def test_sync_status_is_read_only(self) -> None:
        """Status changes only through set_sync_status."""
        record = make_record()

        with pytest.raises(AttributeError):
            record.sync_status = SyncStatus.FAILED  # type: ignore[misc]

    def test_snapshot_detects_changes(self) -> None:
        """Snapshots differ once content or status changes."""
        record = make_record()
        before = record.snapshot()

        record.title = "Buy oat milk"

        assert record.snapshot() != before
