"""Configuration utilities for recordsync CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from recordsync.core.config import RemoteConfig

HOME_ENV = "RECORDSYNC_HOME"
URL_ENV = "RECORDSYNC_URL"
KEY_ENV = "RECORDSYNC_KEY"


def get_config_dir() -> Path:
    """Get the configuration directory for recordsync.

    Returns:
        Path to $RECORDSYNC_HOME if set, otherwise ~/.recordsync.
    """
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".recordsync"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def get_db_path() -> Path:
    """Get the path to the local record database."""
    return get_config_dir() / "records.db"


def load_config() -> dict[str, str]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, str]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def get_remote_config() -> RemoteConfig | None:
    """Build the remote store configuration.

    Environment variables take precedence over the config file.

    Returns:
        RemoteConfig, or None if the URL or API key is missing.
    """
    config = load_config()
    url = os.environ.get(URL_ENV) or config.get("url")
    api_key = os.environ.get(KEY_ENV) or config.get("api_key")
    if not url or not api_key:
        return None
    return RemoteConfig(url=url, api_key=api_key)
