"""Sync commands for recordsync CLI.

Commands:
- sync: Run one reconciliation pass
- sweep: Purge expired soft-deletes
- status: Show engine state and pending work
- watch: Sync and sweep periodically until interrupted
"""

from __future__ import annotations

import sys
import time
from typing import Any

import click

from recordsync.client.cli.config import get_remote_config
from recordsync.client.cli.session import open_engine
from recordsync.client.domain import SyncStatus
from recordsync.client.sync import SyncResult


def display_summary(result: SyncResult) -> None:
    """Display reconciliation results."""
    if result.errors:
        click.echo(click.style("Errors:", fg="red"))
        for error in result.errors:
            click.echo(f"  ✗ {error}")

    if result.pulled + result.merged + result.pushed == 0 and result.success:
        click.echo("Everything is up to date.")
    else:
        click.echo(
            f"Sync complete: {result.pulled} received, "
            f"{result.merged} merged, "
            f"{result.pushed} sent, "
            f"{len(result.failed)} failed"
        )


@click.command()
@click.pass_obj
def sync(obj: dict[str, Any]) -> None:
    """Run one reconciliation pass with the remote store."""
    with open_engine(obj["offline"]) as engine:
        result = engine.sync()
        if result is None:
            click.echo("Offline, nothing synced.")
            return
        if result.aborted:
            click.echo("Error: Sync aborted, remote records could not be fetched.", err=True)
            sys.exit(1)
        display_summary(result)


@click.command()
@click.pass_obj
def sweep(obj: dict[str, Any]) -> None:
    """Permanently remove records deleted more than 5 days ago."""
    with open_engine(obj["offline"]) as engine:
        purged = engine.sweep()
        click.echo(f"Purged {purged} expired records.")


@click.command()
@click.pass_obj
def status(obj: dict[str, Any]) -> None:
    """Show engine state and records awaiting sync."""
    with open_engine(obj["offline"]) as engine:
        remote_config = get_remote_config()
        if remote_config is not None:
            click.echo(f"Remote: {remote_config.url}")
        click.echo(f"State: {engine.state.value}")
        counts = engine.counts()
        for sync_status in SyncStatus:
            count = counts.get(sync_status, 0)
            if count:
                click.echo(f"  {sync_status.label}: {count}")
        if not counts:
            click.echo("  no records")


@click.command()
@click.option(
    "--interval",
    default=60.0,
    show_default=True,
    type=click.FloatRange(min=1.0),
    help="Seconds between sync passes.",
)
@click.pass_obj
def watch(obj: dict[str, Any], interval: float) -> None:
    """Sync periodically until interrupted (Ctrl+C)."""
    from recordsync.client.notifications import notify_error, notify_sync_complete
    from recordsync.client.sync import SyncScheduler

    def on_result(result: SyncResult) -> None:
        if result.errors:
            notify_error(result.errors[-1])
        notify_sync_complete(result.pulled + result.merged, result.pushed)
        display_summary(result)

    with open_engine(obj["offline"]) as engine:
        scheduler = SyncScheduler(engine, sync_interval=interval, on_result=on_result)
        click.echo(f"Watching, syncing every {interval:.0f}s... (Ctrl+C to stop)")
        scheduler.start()
        try:
            while True:
                time.sleep(1.0)
        except KeyboardInterrupt:
            click.echo("\nStopping...")
        finally:
            scheduler.stop()
