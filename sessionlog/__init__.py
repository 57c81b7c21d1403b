"""sessionlog/__init__.py - Public API for the sessionlog package.

sessionlog is a session-scoped, in-process structured log. It keeps a
bounded FIFO buffer of entries for the current session, maintains running
counts per level and per category, and renders entries for interactive
display, persisted flushes and plain-text bug reports.

Quick start:
    from sessionlog import SessionLog

    log = SessionLog(settings={"enabled": True})
    log.start_session()                        # at every session boundary

    log.log_info("Loot", "Item awarded", {"item": "Sword", "to": "Ana"})
    log.log_error("Sync", "Peer timed out", {"peer": "Bo", "after_s": 30})

    log.get_session_logs(level="error")        # newest first
    log.get_stats()["by_category"]             # {"Session": 1, "Loot": 1, "Sync": 1}
    print(log.export_report())                 # plain-text report

    # Persist through any BlobWriter
    from sessionlog import FileBlobWriter
    SessionLog(writer=FileBlobWriter("./logs"))

Exported names:
    SessionLog:         Owner of the store, the counters and every operation.
    SessionLogHandler:  logging.Handler that feeds stdlib records into a SessionLog.
    LogEntry, LogStore: The immutable record and the bounded buffer.
    StatsAggregator:    Running per-level / per-category counters.
    serialize, estimate_size: Bounded payload rendering and size estimation.
    BlobWriter, MemoryBlobWriter, StreamBlobWriter, FileBlobWriter: Flush targets.
    HostEnvironment, SystemHost, Notifier, StreamNotifier: Host collaborators.
    InvalidArgument:    Raised for malformed arguments.
"""

from .buffer import LEVELS, LogEntry, LogStore
from .errors import InvalidArgument, SessionLogError
from .exporter import BlobWriter, FileBlobWriter, MemoryBlobWriter, StreamBlobWriter
from .handler import SessionLogHandler
from .host import HostEnvironment, Notifier, StreamNotifier, SystemHost
from .serialize import estimate_size, serialize
from .session import SessionLog
from .stats import StatsAggregator

__all__ = [
    "SessionLog",
    "SessionLogHandler",
    "LEVELS",
    "LogEntry",
    "LogStore",
    "StatsAggregator",
    "serialize",
    "estimate_size",
    "BlobWriter",
    "MemoryBlobWriter",
    "StreamBlobWriter",
    "FileBlobWriter",
    "HostEnvironment",
    "SystemHost",
    "Notifier",
    "StreamNotifier",
    "InvalidArgument",
    "SessionLogError",
]
__version__ = "0.1.0"
