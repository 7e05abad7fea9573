"""Tests for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from recordsync.client.cli import cli
from recordsync.client.domain import Record, SyncStatus
from recordsync.client.state import LocalRecordStore
from recordsync.core.types import utc_now

if TYPE_CHECKING:
    from conftest import FakeRemoteStore


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def env(tmp_path: Path) -> dict[str, str]:
    """Environment pointing at a temporary config dir and a configured remote."""
    return {
        "RECORDSYNC_HOME": str(tmp_path / ".recordsync"),
        "RECORDSYNC_URL": "https://abc.supabase.co",
        "RECORDSYNC_KEY": "anon-key",
    }


@pytest.fixture(autouse=True)
def fake_client(remote: FakeRemoteStore) -> Iterator[None]:
    """Route the CLI's remote client to the in-memory fake."""
    with patch("recordsync.client.cli.session.SupabaseClient", return_value=remote):
        yield


def invoke(runner: CliRunner, env: dict[str, str], *args: str) -> Result:
    return runner.invoke(cli, list(args), env=env)


def added_id(result: Result) -> str:
    """Extract the record id from 'Added <id>: ...'."""
    return result.output.split()[1].rstrip(":")


class TestConfigure:
    """Tests for 'recordsync configure'."""

    def test_saves_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Should write URL and key to config.json."""
        with patch("recordsync.client.cli.config.get_config_dir", return_value=tmp_path):
            result = runner.invoke(
                cli, ["configure", "--url", "https://abc.supabase.co/", "--key", "k"]
            )

        assert result.exit_code == 0
        config = json.loads((tmp_path / "config.json").read_text())
        assert config == {"url": "https://abc.supabase.co", "api_key": "k"}

    def test_warns_on_http(self, runner: CliRunner, tmp_path: Path) -> None:
        """Plain HTTP is accepted with a warning."""
        with patch("recordsync.client.cli.config.get_config_dir", return_value=tmp_path):
            result = runner.invoke(cli, ["configure", "--url", "http://localhost:54321", "--key", "k"])

        assert result.exit_code == 0
        assert "not HTTPS" in result.output

    def test_rejects_invalid_url(self, runner: CliRunner, tmp_path: Path) -> None:
        """URLs without a scheme are rejected."""
        with patch("recordsync.client.cli.config.get_config_dir", return_value=tmp_path):
            result = runner.invoke(cli, ["configure", "--url", "abc.supabase.co", "--key", "k"])

        assert result.exit_code == 1
        assert not (tmp_path / "config.json").exists()

    def test_commands_require_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Record commands fail until a remote is configured."""
        env = {"RECORDSYNC_HOME": str(tmp_path), "RECORDSYNC_URL": "", "RECORDSYNC_KEY": ""}

        result = runner.invoke(cli, ["list"], env=env)

        assert result.exit_code == 1
        assert "Not configured" in result.output


class TestRecordCommands:
    """Tests for add/list/edit/delete/recover/trash."""

    def test_add_offline(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """--offline keeps the record pending locally."""
        result = invoke(runner, env, "--offline", "add", "Buy milk")

        assert result.exit_code == 0
        assert "pending create" in result.output
        assert remote.calls == []

        listing = invoke(runner, env, "--offline", "list")
        assert "Buy milk" in listing.output

    def test_add_online(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """Online adds are pushed immediately."""
        result = invoke(runner, env, "add", "Buy milk")

        assert result.exit_code == 0
        assert "(synced)" in result.output
        assert added_id(result) in remote.rows

    def test_add_empty_title(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Empty titles are rejected with exit code 1."""
        result = invoke(runner, env, "add", "  ")

        assert result.exit_code == 1
        assert "Title must not be empty" in result.output

    def test_edit(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """Edit changes title and completion."""
        record_id = added_id(invoke(runner, env, "add", "Buy milk"))

        result = invoke(runner, env, "edit", record_id, "--title", "Buy bread", "--completed")

        assert result.exit_code == 0
        assert "[x] Buy bread" in result.output
        assert remote.rows[record_id].completed is True

    def test_edit_requires_change(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Edit without options is an error."""
        result = invoke(runner, env, "edit", "some-id")

        assert result.exit_code == 1
        assert "Nothing to change" in result.output

    def test_edit_unknown_id(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Unknown ids fail with exit code 1."""
        result = invoke(runner, env, "edit", "missing", "--title", "x")

        assert result.exit_code == 1
        assert "No record with id missing" in result.output

    def test_delete_trash_recover(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Deleted records move to the trash and back."""
        record_id = added_id(invoke(runner, env, "add", "Buy milk"))

        assert invoke(runner, env, "delete", record_id).exit_code == 0
        assert record_id in invoke(runner, env, "trash").output
        assert "No records." in invoke(runner, env, "list").output

        assert invoke(runner, env, "recover", record_id).exit_code == 0
        assert "Trash is empty." in invoke(runner, env, "trash").output
        assert record_id in invoke(runner, env, "list").output

    def test_trash_sweeps_expired(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Records deleted more than 5 days ago are purged when the trash is shown."""
        deleted_at = utc_now() - timedelta(days=6)
        expired = Record.new("Old", now=deleted_at)
        expired.set_sync_status(SyncStatus.PENDING_DELETE, now=deleted_at)
        expired.set_sync_status(SyncStatus.SYNCED)
        recent = Record.new("Recent")
        recent.set_sync_status(SyncStatus.PENDING_DELETE)
        recent.set_sync_status(SyncStatus.SYNCED)
        store = LocalRecordStore(Path(env["RECORDSYNC_HOME"]) / "records.db")
        store.insert(expired)
        store.insert(recent)
        store.close()

        result = invoke(runner, env, "--offline", "trash")

        assert result.exit_code == 0
        assert expired.id not in result.output
        assert recent.id in result.output
        assert "deleted " in result.output

    def test_resolve_non_failed(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Resolving a synced record does nothing."""
        record_id = added_id(invoke(runner, env, "add", "Buy milk"))

        result = invoke(runner, env, "resolve", record_id)

        assert result.exit_code == 0
        assert "Nothing to resolve" in result.output


class TestSyncCommands:
    """Tests for sync/sweep/status."""

    def test_sync_offline(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Offline sync is skipped."""
        result = invoke(runner, env, "--offline", "sync")

        assert result.exit_code == 0
        assert "Offline, nothing synced." in result.output

    def test_sync_pulls(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """Remote records are received by a pass."""
        remote.put(Record.new("From elsewhere"))

        result = invoke(runner, env, "sync")

        assert result.exit_code == 0
        assert "1 received" in result.output
        assert "From elsewhere" in invoke(runner, env, "list").output

    def test_sync_up_to_date(self, runner: CliRunner, env: dict[str, str]) -> None:
        """An empty pass reports nothing to do."""
        result = invoke(runner, env, "sync")

        assert "Everything is up to date." in result.output

    def test_sync_pull_failure(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """A failed pull exits 1 and prints the pending error."""
        remote.failing.add("fetch_all")

        result = invoke(runner, env, "sync")

        assert result.exit_code == 1
        assert "Sync error: fetch_all failed" in result.output

    def test_push_failure_notice_printed(
        self, runner: CliRunner, env: dict[str, str], remote: FakeRemoteStore
    ) -> None:
        """A failed push is reported at the end of the command."""
        remote.failing.add("create")

        result = invoke(runner, env, "add", "Buy milk")

        assert result.exit_code == 0
        assert "(failed)" in result.output
        assert "Sync error: create failed" in result.output

    def test_sweep(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Sweep reports the number of purged records."""
        result = invoke(runner, env, "sweep")

        assert result.exit_code == 0
        assert "Purged 0 expired records." in result.output

    def test_status(self, runner: CliRunner, env: dict[str, str]) -> None:
        """Status shows remote, state and pending counts."""
        invoke(runner, env, "--offline", "add", "Buy milk")

        result = invoke(runner, env, "--offline", "status")

        assert result.exit_code == 0
        assert "Remote: https://abc.supabase.co" in result.output
        assert "State: offline" in result.output
        assert "pending create: 1" in result.output
