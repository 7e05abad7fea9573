"""Remote configuration command for recordsync CLI.

Commands:
- configure: Store the remote store URL and API key
"""

from __future__ import annotations

import sys

import click

from recordsync.client.cli.config import get_config_file, load_config, save_config
from recordsync.core.config import RemoteConfig


@click.command()
@click.option(
    "--url",
    required=True,
    help="Remote project URL (e.g., https://xyz.supabase.co).",
)
@click.option(
    "--key",
    required=True,
    help="API key for the remote project.",
)
def configure(url: str, key: str) -> None:
    """Store the remote store URL and API key.

    Environment variables RECORDSYNC_URL and RECORDSYNC_KEY override
    the stored values.
    """
    if not url.startswith(("http://", "https://")):
        click.echo("Error: URL must start with http:// or https://", err=True)
        sys.exit(1)

    remote_config = RemoteConfig(url=url, api_key=key)
    if not remote_config.is_secure:
        click.echo("Warning: URL is not HTTPS, the API key is sent in clear text.", err=True)

    config = load_config()
    config["url"] = remote_config.url
    config["api_key"] = remote_config.api_key
    save_config(config)

    click.echo(f"Configuration saved to {get_config_file()}")
