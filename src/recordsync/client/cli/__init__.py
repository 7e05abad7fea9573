"""Command-line interface for recordsync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- configure: Store the remote URL and API key
- add / list / trash / edit / delete / recover: Record commands
- resolve: Retry a FAILED record
- sync: Run one reconciliation pass
- sweep: Purge expired soft-deletes
- status: Show engine state
- watch: Sync periodically until interrupted
"""

from __future__ import annotations

import logging

import click

from recordsync.client.cli.config import (
    get_config_dir,
    get_config_file,
    get_db_path,
    get_remote_config,
    load_config,
    save_config,
)
from recordsync.client.cli.configure import configure
from recordsync.client.cli.records import (
    add,
    delete,
    edit,
    list_records,
    recover,
    resolve,
    trash,
)
from recordsync.client.cli.sync import status, sweep, sync, watch


@click.group()
@click.version_option(package_name="recordsync")
@click.option("--offline", is_flag=True, help="Work locally without contacting the remote store.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, offline: bool, verbose: bool) -> None:
    """recordsync - Offline-first record synchronization."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"offline": offline}


# Setup command
cli.add_command(configure)

# Record commands
cli.add_command(add)
cli.add_command(list_records)
cli.add_command(trash)
cli.add_command(edit)
cli.add_command(delete)
cli.add_command(recover)
cli.add_command(resolve)

# Sync commands
cli.add_command(sync)
cli.add_command(sweep)
cli.add_command(status)
cli.add_command(watch)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    # Main entry points
    "cli",
    "main",
    # Config utilities
    "get_config_dir",
    "get_config_file",
    "get_db_path",
    "get_remote_config",
    "load_config",
    "save_config",
]
