"""Engine wiring shared by the CLI commands."""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Iterator

import click

from recordsync.client.api import SupabaseClient
from recordsync.client.cli.config import get_db_path, get_remote_config
from recordsync.client.connectivity import ConnectivityMonitor
from recordsync.client.state import LocalRecordStore
from recordsync.client.sync import SyncEngine
from recordsync.core.types import SyncError


@contextlib.contextmanager
def open_engine(offline: bool = False) -> Iterator[SyncEngine]:
    """Open the local store and remote client and yield a SyncEngine.

    Expected errors are printed to stderr and exit with status 1. Any
    pending sync error is printed (and acknowledged) on the way out.

    Args:
        offline: Pin connectivity to offline; no remote calls are made.
    """
    remote_config = get_remote_config()
    if remote_config is None:
        click.echo("Error: Not configured. Run 'recordsync configure' first.", err=True)
        sys.exit(1)

    store = LocalRecordStore(get_db_path())
    client = SupabaseClient(remote_config)
    monitor = ConnectivityMonitor(client)
    if offline:
        monitor.force(False)
    engine = SyncEngine(client, store, monitor)

    try:
        yield engine
    except (SyncError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        message = engine.notice.acknowledge()
        if message:
            click.echo(click.style(f"Sync error: {message}", fg="red"), err=True)
        client.close()
        store.close()
