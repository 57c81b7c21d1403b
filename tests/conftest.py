"""conftest.py - Shared fakes for the sessionlog test suite.

Provides:
    - FakeHost: a HostEnvironment with a manually advanced clock.
    - RecordingNotifier: a Notifier that keeps every message it receives.
    - FailingWriter: a BlobWriter that reports (or raises) a failure.
    - make_log: factory fixture wiring the fakes into a SessionLog.
"""

import pytest

from sessionlog import SessionLog
from sessionlog.exporter import BlobWriter, MemoryBlobWriter
from sessionlog.host import HostEnvironment, Notifier

START_TIME = 1_700_000_000


class FakeHost(HostEnvironment):
    def __init__(self, start: int = START_TIME) -> None:
        self.time = start

    def now(self) -> int:
        return self.time

    def advance(self, seconds: int) -> None:
        self.time += seconds

    def build(self):
        return "11.0.2"

    def version(self):
        return "57212"

    def addon_version(self):
        return "0.4.1"

    def user_name(self):
        return "Ana"

    def realm_name(self):
        return "Silvermoon"


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages = []

    def notify(self, severity: str, message: str) -> None:
        self.messages.append((severity, message))


class FailingWriter(BlobWriter):
    def __init__(self, error="disk full", raises: bool = False) -> None:
        self.error = error
        self.raises = raises
        self.calls = 0

    def write(self, name, payload):
        self.calls += 1
        if self.raises:
            raise OSError(self.error)
        return False, self.error


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def writer() -> MemoryBlobWriter:
    return MemoryBlobWriter()


@pytest.fixture
def failing_writer():
    return FailingWriter


@pytest.fixture
def make_log(host, notifier, writer):
    """Return a factory building a SessionLog on top of the fakes."""

    def _make(enabled: bool = True, **kwargs) -> SessionLog:
        kwargs.setdefault("host", host)
        kwargs.setdefault("notifier", notifier)
        kwargs.setdefault("writer", writer)
        kwargs.setdefault("settings", {"enabled": enabled})
        return SessionLog(**kwargs)

    return _make
