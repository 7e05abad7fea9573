"""User-facing error notice and desktop notifications.

This module provides:
- ErrorNotice: Holds the most recent sync error until it is acknowledged
- Desktop notifications (macOS notification center, Linux notify-send)
  used by the long-running watch loop
"""

from __future__ import annotations

import logging
import platform
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)


class ErrorNotice:
    """The most recent error message, shown once and dismissed.

    Posting a new message replaces any unacknowledged one. Reading
    ``message`` does not clear it; ``acknowledge()`` does.
    """

    def __init__(self) -> None:
        self._message: str | None = None
        self._lock = threading.Lock()

    @property
    def message(self) -> str | None:
        """Pending message, or None."""
        with self._lock:
            return self._message

    @property
    def pending(self) -> bool:
        """True if a message awaits acknowledgment."""
        return self.message is not None

    def post(self, message: str) -> None:
        """Record ``message`` as the latest error."""
        with self._lock:
            self._message = message

    def acknowledge(self) -> str | None:
        """Clear and return the pending message."""
        with self._lock:
            message, self._message = self._message, None
        return message


class NotificationType(Enum):
    """Type of notification."""

    INFO = auto()
    ERROR = auto()


@dataclass
class Notification:
    """Represents a notification to display."""

    title: str
    message: str
    type: NotificationType = NotificationType.INFO


def _notify_macos(notification: Notification) -> bool:
    """Send notification on macOS using osascript."""
    try:
        title = notification.title.replace('"', '\\"')
        message = notification.message.replace('"', '\\"')

        script = f'display notification "{message}" with title "{title}"'
        subprocess.run(["osascript", "-e", script], capture_output=True, check=True)
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"macOS notification failed: {e}")
        return False


def _notify_linux(notification: Notification) -> bool:
    """Send notification on Linux using notify-send."""
    urgency = "critical" if notification.type is NotificationType.ERROR else "normal"
    try:
        subprocess.run(
            [
                "notify-send",
                "--urgency", urgency,
                "--app-name", "recordsync",
                notification.title,
                notification.message,
            ],
            capture_output=True,
            check=True,
        )
        return True
    except FileNotFoundError:
        logger.debug("notify-send not found")
        return False
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"Linux notification failed: {e}")
        return False


def send_notification(notification: Notification) -> bool:
    """Send a desktop notification.

    Args:
        notification: The notification to send.

    Returns:
        True if notification was sent, False if failed or unavailable.
    """
    system = platform.system()

    if system == "Darwin":
        return _notify_macos(notification)
    if system == "Linux":
        return _notify_linux(notification)
    logger.debug(f"Desktop notifications not supported on {system}")
    return False


def notify_sync_complete(pulled: int, pushed: int) -> bool:
    """Notify that a pass moved records (silent when nothing changed).

    Args:
        pulled: Records received from the remote store.
        pushed: Records sent to the remote store.

    Returns:
        True if notification was sent.
    """
    if pulled == 0 and pushed == 0:
        return False

    parts = []
    if pulled > 0:
        parts.append(f"{pulled} received")
    if pushed > 0:
        parts.append(f"{pushed} sent")

    return send_notification(Notification(
        title="recordsync - Sync Complete",
        message=", ".join(parts),
    ))


def notify_error(message: str) -> bool:
    """Send an error notification.

    Args:
        message: Error message.

    Returns:
        True if notification was sent.
    """
    return send_notification(Notification(
        title="recordsync - Error",
        message=message,
        type=NotificationType.ERROR,
    ))
