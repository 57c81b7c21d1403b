"""host.py - Read-only facts supplied by the host, and user notifications.

The engine does not decide what time it is or who is running it. It asks a
HostEnvironment, treats every answer as opaque, and substitutes "Unknown"
in reports for any fact the host returns as None.

User-visible notifications (enable/disable, clear, flush failure) go to a
Notifier. The engine only produces the text and a severity; rendering it
(colour, chat frame, console) is the notifier's business.
"""

import getpass
import platform
import socket
import sys
import time
from abc import ABC, abstractmethod
from typing import Optional

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"
MUTED = "muted"


class HostEnvironment(ABC):
    """Source of the current time and of environment facts for reports."""

    @abstractmethod
    def now(self) -> int:
        """Return the current wall-clock time in whole seconds."""

    def build(self) -> Optional[str]:
        return None

    def version(self) -> Optional[str]:
        return None

    def addon_version(self) -> Optional[str]:
        return None

    def user_name(self) -> Optional[str]:
        return None

    def realm_name(self) -> Optional[str]:
        return None

    def guild_name(self) -> Optional[str]:
        return None

    def group_status(self) -> Optional[str]:
        return None


class SystemHost(HostEnvironment):
    """HostEnvironment backed by the running Python process.

    Args:
        addon_version: Version string of the application embedding the
            engine, reported verbatim.
    """

    def __init__(self, addon_version: Optional[str] = None) -> None:
        self._addon_version = addon_version

    def now(self) -> int:
        return int(time.time())

    def build(self) -> Optional[str]:
        return platform.python_build()[0]

    def version(self) -> Optional[str]:
        return platform.python_version()

    def addon_version(self) -> Optional[str]:
        return self._addon_version

    def user_name(self) -> Optional[str]:
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return None

    def realm_name(self) -> Optional[str]:
        return socket.gethostname() or None


class Notifier(ABC):
    """Destination for short user-facing status messages."""

    @abstractmethod
    def notify(self, severity: str, message: str) -> None:
        """Show ``message``; ``severity`` is one of SUCCESS, WARNING, ERROR, MUTED."""


class StreamNotifier(Notifier):
    """Print notifications to a stream (default: stderr).

    Output format::

        [sessionlog] Logging enabled.
        [sessionlog] ERROR: Failed to flush logs: disk full
    """

    def __init__(self, stream=None, prefix: str = "[sessionlog]") -> None:
        self._stream = stream or sys.stderr
        self._prefix = prefix

    def notify(self, severity: str, message: str) -> None:
        if severity == ERROR:
            print(f"{self._prefix} ERROR: {message}", file=self._stream)
        else:
            print(f"{self._prefix} {message}", file=self._stream)
