"""Record commands for recordsync CLI.

Commands:
- add: Create a record
- list: Show active records
- trash: Show soft-deleted records
- edit: Change a record's title or completion
- delete: Move a record to the trash
- recover: Restore a record from the trash
- resolve: Retry a FAILED record against the remote store
"""

from __future__ import annotations

import sys
from typing import Any

import click

from recordsync.client.cli.session import open_engine
from recordsync.client.domain import Record


def format_record(record: Record) -> str:
    """One-line rendering of a record for listings."""
    mark = "x" if record.completed else " "
    return f"{record.id}  [{mark}] {record.title}  ({record.sync_status.label})"


@click.command()
@click.argument("title")
@click.pass_obj
def add(obj: dict[str, Any], title: str) -> None:
    """Create a record titled TITLE."""
    with open_engine(obj["offline"]) as engine:
        record = engine.add(title)
        click.echo(f"Added {record.id}: {record.title} ({record.sync_status.label})")


@click.command(name="list")
@click.pass_obj
def list_records(obj: dict[str, Any]) -> None:
    """Show active records, newest first.

    Expired soft-deletes are swept first.
    """
    with open_engine(obj["offline"]) as engine:
        engine.sweep()
        records = engine.active()
        if not records:
            click.echo("No records.")
            return
        for record in records:
            click.echo(format_record(record))


@click.command()
@click.pass_obj
def trash(obj: dict[str, Any]) -> None:
    """Show soft-deleted records, newest first.

    Records deleted more than 5 days ago are purged before listing.
    """
    with open_engine(obj["offline"]) as engine:
        engine.sweep()
        records = engine.trash()
        if not records:
            click.echo("Trash is empty.")
            return
        for record in records:
            line = format_record(record)
            if record.deleted_at is not None:
                line += f"  deleted {record.deleted_at:%Y-%m-%d %H:%M}"
            click.echo(line)


@click.command()
@click.argument("record_id")
@click.option("--title", default=None, help="New title.")
@click.option(
    "--completed/--not-completed",
    default=None,
    help="Mark the record completed or not.",
)
@click.pass_obj
def edit(
    obj: dict[str, Any],
    record_id: str,
    title: str | None,
    completed: bool | None,
) -> None:
    """Change the title or completion of RECORD_ID."""
    if title is None and completed is None:
        click.echo("Error: Nothing to change. Pass --title or --completed.", err=True)
        sys.exit(1)
    with open_engine(obj["offline"]) as engine:
        record = engine.edit(record_id, title=title, completed=completed)
        click.echo(f"Updated {format_record(record)}")


@click.command()
@click.argument("record_id")
@click.pass_obj
def delete(obj: dict[str, Any], record_id: str) -> None:
    """Move RECORD_ID to the trash."""
    with open_engine(obj["offline"]) as engine:
        record = engine.delete(record_id)
        click.echo(f"Moved to trash: {format_record(record)}")


@click.command()
@click.argument("record_id")
@click.pass_obj
def recover(obj: dict[str, Any], record_id: str) -> None:
    """Restore RECORD_ID from the trash."""
    with open_engine(obj["offline"]) as engine:
        record = engine.recover(record_id)
        click.echo(f"Recovered {format_record(record)}")


@click.command()
@click.argument("record_id")
@click.pass_obj
def resolve(obj: dict[str, Any], record_id: str) -> None:
    """Retry a FAILED record against the remote store."""
    with open_engine(obj["offline"]) as engine:
        result = engine.resolve(record_id)
        if result is None:
            click.echo(f"Nothing to resolve for {record_id}.")
            return
        outcome = result.outcome.name.lower().replace("_", " ")
        click.echo(f"{record_id}: {outcome}")
