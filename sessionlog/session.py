"""session.py - SessionLog, the owner of one session's entries and statistics.

SessionLog ties the pieces together:

    log()/log_info()/...   leveled gate  -> LogStore.append -> StatsAggregator
    get_session_logs()     query over a snapshot of the store
    get_stats()            aggregate counters, duration, memory estimate
    display_logs()         lines for an interactive view
    flush()                hand formatted lines to a BlobWriter
    export_report()        multi-section plain-text report

Lifecycle is explicit: construct a SessionLog, call ``start_session()`` at
each session boundary, and ``close()`` when done. Nothing is global, so
several independent logs can coexist in one process.

Gate ordering:
    ``log()`` checks the enabled flag *before* validating its arguments, so
    malformed calls while disabled are silently ignored. The convenience
    wrappers ``log_info()`` etc. validate category and message first and
    raise InvalidArgument whether or not logging is enabled.

Self-logging:
    get_stats, display_logs, flush and export_report record their own
    invocation as an entry. Each does so through a ReentrancyGuard, and each
    builds its result before that entry is appended, so an export never
    contains its own completion record.

Example:
    >>> from sessionlog import SessionLog
    >>> log = SessionLog(settings={"enabled": True})
    >>> log.start_session()
    >>> _ = log.log_warn("Net", "Retrying request", {"attempt": 2})
    >>> [e.message for e in log.get_session_logs(level="warn")]
    ['Retrying request']
"""

import logging
import threading
from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from .buffer import (
    DEBUG,
    DEFAULT_MAX_ENTRIES,
    ERROR,
    INFO,
    WARN,
    LogEntry,
    LogStore,
    normalize_level,
)
from .context import ReentrancyGuard
from .errors import InvalidArgument
from .exporter import BlobWriter, MemoryBlobWriter
from .formatting import (
    format_bytes,
    format_duration,
    format_entry_for_display,
    format_flush_line,
    format_report_line,
    format_timestamp,
)
from .host import ERROR as NOTIFY_ERROR
from .host import (
    MUTED,
    SUCCESS,
    WARNING,
    HostEnvironment,
    Notifier,
    StreamNotifier,
    SystemHost,
)
from .query import get_session_logs
from .serialize import estimate_entry_size
from .stats import StatsAggregator

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0"
DEFAULT_BLOB_NAME = "session_log"
REPORT_ENTRY_LIMIT = 50
DISPLAY_DEFAULT_COUNT = 10
SELF_CATEGORY = "Session"

_RULE = "-" * 60


def _require_text(value: Any, what: str, caller: str) -> None:
    if not isinstance(value, str) or value == "":
        raise InvalidArgument(f"{caller}() requires a non-empty {what} string")


def _describe_filters(level: Optional[str], category: Optional[str], sep: str) -> List[str]:
    filters = []
    if level is not None:
        filters.append(f"level{sep}{level}")
    if category is not None:
        filters.append(f"category{sep}{category}")
    return filters


class SessionLog:
    """Bounded, session-scoped structured log with stats and export.

    Attributes:
        _store (LogStore): Entries of the current session, oldest first.
        _stats (StatsAggregator): Counters kept in step with ``_store``.
        _host (HostEnvironment): Clock and environment facts.
        _notifier (Notifier): Receives user-visible status messages.
        _writer (BlobWriter): Destination for ``flush()``.
        _settings (MutableMapping): Persisted flags; only ``"enabled"`` is used.
        _lock (threading.RLock): Serialises append, reset and clear, since a
            SessionLogHandler may feed the log from several threads.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        host: Optional[HostEnvironment] = None,
        notifier: Optional[Notifier] = None,
        writer: Optional[BlobWriter] = None,
        settings: Optional[MutableMapping[str, Any]] = None,
        blob_name: str = DEFAULT_BLOB_NAME,
    ) -> None:
        """Create a log with an empty store and no active session.

        Args:
            max_entries: Store capacity. Defaults to 1000.
            host: Clock and environment facts. Defaults to SystemHost().
            notifier: Receiver of user-visible messages. Defaults to a
                StreamNotifier on stderr.
            writer: Flush destination. Defaults to a MemoryBlobWriter.
            settings: Mapping the enabled flag is loaded from and saved to.
                A missing or non-boolean value loads as disabled.
            blob_name: Name passed to ``writer`` on every flush.

        Raises:
            InvalidArgument: If ``max_entries`` is not a non-negative int.
        """
        self._store = LogStore(max_entries)
        self._stats = StatsAggregator()
        self._host = host or SystemHost()
        self._notifier = notifier or StreamNotifier()
        self._writer = writer or MemoryBlobWriter()
        self._settings = settings if settings is not None else {}
        self._blob_name = blob_name
        self._session_start: Optional[int] = None
        self._guard = ReentrancyGuard()
        self._lock = threading.RLock()

        enabled = self._settings.get("enabled", False)
        self._enabled = enabled if isinstance(enabled, bool) else False
        self._settings["enabled"] = self._enabled

    # ---------------------------------------------------------------------- #
    # State accessors
    # ---------------------------------------------------------------------- #

    @property
    def max_entries(self) -> int:
        return self._store.max_entries

    @property
    def session_start(self) -> Optional[int]:
        """Host time of the last ``start_session()``, or None."""
        return self._session_start

    @property
    def stats(self) -> StatsAggregator:
        """A copy of the incrementally maintained counters."""
        with self._lock:
            return self._stats.copy()

    def snapshot(self) -> List[LogEntry]:
        """Return the stored entries, oldest first."""
        with self._lock:
            return self._store.snapshot()

    def __len__(self) -> int:
        return len(self._store)

    # ---------------------------------------------------------------------- #
    # Lifecycle
    # ---------------------------------------------------------------------- #

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Turn logging on or off and persist the flag.

        Setting the current state again only re-persists the flag. A real
        transition records one INFO entry (written before the gate closes
        when disabling, after it opens when enabling) and sends one
        notification.

        Raises:
            InvalidArgument: If ``enabled`` is not a bool.
        """
        if not isinstance(enabled, bool):
            raise InvalidArgument(
                f"set_enabled() expects a bool, got {type(enabled).__name__}"
            )
        previous = self._enabled
        self._settings["enabled"] = enabled
        if enabled == previous:
            return

        details = {
            "previous_state": previous,
            "new_state": enabled,
            "timestamp": self._host.now(),
        }
        if enabled:
            self._enabled = True
            self.log_info(SELF_CATEGORY, "Logging enabled", details)
            self._notifier.notify(SUCCESS, "Logging enabled.")
        else:
            self.log_info(SELF_CATEGORY, "Logging disabled", details)
            self._enabled = False
            self._notifier.notify(WARNING, "Logging disabled.")

    def toggle(self) -> bool:
        """Invert the enabled flag and return the new state."""
        self.set_enabled(not self._enabled)
        return self._enabled

    def start_session(self) -> None:
        """Begin a new session, discarding every entry and counter.

        When logging is enabled the new session opens with one INFO entry
        describing the host.
        """
        with self._lock:
            self._session_start = self._host.now()
            self._store.reset()
            self._stats.reset()

        if self._enabled:
            self.log_info(
                SELF_CATEGORY,
                "New session started",
                {
                    "session_start_time": self._session_start,
                    "build": self._host.build(),
                    "version": self._host.version(),
                    "user_name": self._host.user_name(),
                    "realm_name": self._host.realm_name(),
                    "addon_version": self._host.addon_version(),
                },
            )

    def clear_logs(self) -> int:
        """Drop every entry of the current session and return how many there were."""
        with self._lock:
            previous = self._store.reset()
            self._stats.reset()

        if previous and self._enabled:
            self.log_info(
                SELF_CATEGORY,
                "Logs manually cleared",
                {"previous_log_count": previous, "cleared_at": self._host.now()},
            )

        if previous:
            self._notifier.notify(WARNING, f"Logs cleared ({previous} entries removed).")
        else:
            self._notifier.notify(MUTED, "No logs to clear.")
        return previous

    def close(self) -> None:
        """Release the stored entries and end the session."""
        with self._lock:
            self._store.reset()
            self._stats.reset()
            self._session_start = None

    # ---------------------------------------------------------------------- #
    # Leveled logging gate
    # ---------------------------------------------------------------------- #

    def log(
        self, level: str, category: str, message: str, data: Any = None
    ) -> Optional[LogEntry]:
        """Record one entry if logging is enabled.

        Args:
            level: INFO, WARN, ERROR or DEBUG in any letter case.
            category: Name of the subsystem producing the entry.
            message: Human-readable text.
            data: Optional nested payload, stored by reference.

        Returns:
            The stored entry, or None when logging is disabled.

        Raises:
            InvalidArgument: If logging is enabled and ``level``, ``category``
                or ``message`` is empty or not a string, or ``level`` is not a
                known level. Never raised while disabled.
        """
        if not self._enabled:
            return None

        _require_text(level, "level", "log")
        _require_text(category, "category", "log")
        _require_text(message, "message", "log")
        level = normalize_level(level)

        now = self._host.now()
        if self._session_start is None:
            session_time = 0
        else:
            session_time = max(0, now - self._session_start)

        entry = LogEntry(now, session_time, level, category, message, data)
        with self._lock:
            evicted = self._store.append(entry)
            self._stats.update(entry)
            if evicted is not None:
                self._stats.discard(evicted)
        return entry

    def log_info(self, category: str, message: str, data: Any = None) -> Optional[LogEntry]:
        _require_text(category, "category", "log_info")
        _require_text(message, "message", "log_info")
        return self.log(INFO, category, message, data)

    def log_warn(self, category: str, message: str, data: Any = None) -> Optional[LogEntry]:
        _require_text(category, "category", "log_warn")
        _require_text(message, "message", "log_warn")
        return self.log(WARN, category, message, data)

    def log_error(self, category: str, message: str, data: Any = None) -> Optional[LogEntry]:
        _require_text(category, "category", "log_error")
        _require_text(message, "message", "log_error")
        return self.log(ERROR, category, message, data)

    def log_debug(self, category: str, message: str, data: Any = None) -> Optional[LogEntry]:
        _require_text(category, "category", "log_debug")
        _require_text(message, "message", "log_debug")
        return self.log(DEBUG, category, message, data)

    def _log_self(self, operation: str, level: str, message: str, data: Dict[str, Any]) -> None:
        if not self._enabled:
            return
        with self._guard.hold(operation) as acquired:
            if acquired:
                self.log(level, SELF_CATEGORY, message, data)

    # ---------------------------------------------------------------------- #
    # Retrieval and statistics
    # ---------------------------------------------------------------------- #

    def get_session_logs(
        self,
        level: Optional[str] = None,
        category: Optional[str] = None,
        count: Optional[float] = None,
    ) -> List[LogEntry]:
        """Return matching entries newest first; see ``query.get_session_logs``."""
        return get_session_logs(self.snapshot(), level, category, count)

    def verify_stats(self) -> bool:
        """Return True if the running counters equal a full recount of the store."""
        with self._lock:
            return StatsAggregator.recompute(self._store) == self._stats

    def _collect_stats(self) -> Dict[str, Any]:
        now = self._host.now()
        with self._lock:
            entries = self._store.snapshot()
            counters = self._stats.copy()

        if self._session_start is None:
            duration = 0
        else:
            duration = max(0, now - self._session_start)
        memory = sum(estimate_entry_size(entry) for entry in entries)
        max_entries = self._store.max_entries

        return {
            "session_start_time": self._session_start,
            "session_duration": duration,
            "session_duration_formatted": format_duration(duration),
            "total_entries": counters.total,
            "by_level": counters.by_level,
            "by_category": counters.by_category,
            "estimated_memory_bytes": memory,
            "estimated_memory_formatted": format_bytes(memory),
            "max_entries": max_entries,
            "buffer_utilization": counters.total / max_entries if max_entries > 0 else 0.0,
            "average_logs_per_minute": counters.total * 60 / duration if duration > 0 else 0.0,
            "enabled": self._enabled,
            "version": ENGINE_VERSION,
            "generated_at": now,
            "generated_at_formatted": format_timestamp(now),
        }

    def get_stats(self) -> Dict[str, Any]:
        """Summarise the current session.

        Returns:
            A dict with ``session_duration``, ``total_entries``, ``by_level``,
            ``by_category``, ``estimated_memory_bytes``, ``buffer_utilization``
            and their formatted companions. The figures describe the store as
            it was before this call recorded its own DEBUG entry.
        """
        stats = self._collect_stats()
        self._log_self(
            "stats",
            DEBUG,
            "System statistics generated",
            {
                "total_entries": stats["total_entries"],
                "memory_usage": stats["estimated_memory_formatted"],
                "session_duration": stats["session_duration_formatted"],
                "buffer_utilization": f"{stats['buffer_utilization'] * 100:.1f}%",
            },
        )
        return stats

    # ---------------------------------------------------------------------- #
    # Display, flush and export
    # ---------------------------------------------------------------------- #

    def display_logs(
        self,
        level: Optional[str] = None,
        category: Optional[str] = None,
        count: float = DISPLAY_DEFAULT_COUNT,
    ) -> List[str]:
        """Return display lines for the newest matching entries.

        Args:
            level: Optional level filter.
            category: Optional category filter.
            count: Number of entries to show. Defaults to 10.

        Returns:
            Header, separator, one line per entry (newest first) and, when
            more entries exist, a footer saying how many. A single "not found"
            line when nothing matches; an empty list when logging is disabled.

        Raises:
            InvalidArgument: If a filter is not a string or ``count`` is not a
                positive number.
        """
        if level is not None and not isinstance(level, str):
            raise InvalidArgument(f"level must be a string or None, got {level!r}")
        if category is not None and not isinstance(category, str):
            raise InvalidArgument(f"category must be a string or None, got {category!r}")
        if (
            isinstance(count, bool)
            or not isinstance(count, (int, float))
            or count != count
            or count <= 0
        ):
            raise InvalidArgument(f"count must be a positive number, got {count!r}")

        if not self._enabled:
            self._notifier.notify(WARNING, "Logging is disabled. Enable it to view logs.")
            return []

        entries = self.get_session_logs(level, category, count)
        if not entries:
            filters = _describe_filters(level, category, "=")
            suffix = f" (filtered by {', '.join(filters)})" if filters else ""
            return [f"No log entries found{suffix}."]

        total = len(self._store)
        header = "Session Logs"
        filters = _describe_filters(level, category, ": ")
        if filters:
            header += f" ({', '.join(filters)})"
        header += f" - Showing {len(entries)} entries"

        lines = [header, _RULE]
        lines.extend(format_entry_for_display(entry) for entry in entries)
        if len(entries) < total:
            lines.append(_RULE)
            lines.append(
                f"{total - len(entries)} more entries available. "
                "Use the count parameter to see more."
            )

        self._log_self(
            "display",
            DEBUG,
            "Logs displayed",
            {
                "entries_shown": len(entries),
                "total_entries": total,
                "level_filter": level,
                "category_filter": category,
                "display_count": count,
            },
        )
        return lines

    def _version_info(self) -> Dict[str, Optional[str]]:
        return {
            "build": self._host.build(),
            "version": self._host.version(),
            "addon_version": self._host.addon_version(),
        }

    def flush(self) -> Tuple[bool, str]:
        """Persist the current session's entries through the blob writer.

        Returns:
            ``(True, message)`` on success. ``(False, reason)`` when there is
            nothing to flush, logging is disabled, or the writer failed; in
            the last case ``reason`` is the writer's own description.
        """
        entries = self.snapshot()
        if not entries:
            return False, "No logs to flush"
        if not self._enabled:
            return False, "Logging is disabled"

        now = self._host.now()
        payload = {
            "session_start": self._session_start,
            "last_flush": now,
            "version_info": self._version_info(),
            "log_count": len(entries),
            "logs": [format_flush_line(entry) for entry in entries],
        }

        try:
            ok, error = self._writer.write(self._blob_name, payload)
        except Exception as exc:
            logger.warning("Blob writer raised while flushing %r", self._blob_name, exc_info=True)
            ok, error = False, str(exc)

        if not ok:
            reason = error or "Flush operation failed"
            logger.warning("Failed to flush session logs to %r: %s", self._blob_name, reason)
            self._notifier.notify(NOTIFY_ERROR, f"Failed to flush logs: {reason}")
            return False, reason

        self._log_self(
            "flush",
            INFO,
            "Logs flushed",
            {"log_count": len(entries), "flush_time": now, "blob_name": self._blob_name},
        )
        return True, f"Logs flushed to {self._blob_name}"

    def export_report(self) -> str:
        """Build a plain-text report of the session for bug reports.

        Sections: header, system information, statistics, the 50 most recent
        entries, footer. Stats and entries are captured before the report
        records its own INFO entry.
        """
        host = self._host
        stats = self._collect_stats()
        recent = self.get_session_logs(count=REPORT_ENTRY_LIMIT)

        def fact(value: Optional[str]) -> str:
            return "Unknown" if value is None else str(value)

        lines = [
            "=== Session Log Report ===",
            f"Generated: {stats['generated_at_formatted']}",
            "",
            "--- System Information ---",
            f"Build: {fact(host.build())}",
            f"Version: {fact(host.version())}",
            f"Addon Version: {fact(host.addon_version())}",
            f"Engine Version: {ENGINE_VERSION}",
            f"User: {fact(host.user_name())}",
            f"Realm: {fact(host.realm_name())}",
            f"Guild: {fact(host.guild_name())}",
            f"Group: {fact(host.group_status())}",
            f"Logging Enabled: {str(self._enabled).lower()}",
        ]
        if self._session_start is not None:
            lines.append(f"Session Duration: {stats['session_duration_formatted']}")
        lines.append("")

        lines.append("--- Session Statistics ---")
        lines.append(f"Total Log Entries: {stats['total_entries']}")
        lines.append(f"Memory Usage: {format_bytes(stats['estimated_memory_bytes'])}")
        lines.append(f"Session Uptime: {format_duration(stats['session_duration'])}")
        lines.append(f"Buffer Utilization: {stats['buffer_utilization'] * 100:.1f}%")
        lines.append("Entries by Level:")
        for level, count in sorted(stats["by_level"].items()):
            lines.append(f"  {level}: {count}")
        lines.append("Entries by Category:")
        for category, count in sorted(stats["by_category"].items()):
            lines.append(f"  {category}: {count}")
        lines.append("")

        lines.append("--- Recent Log Entries ---")
        if not recent:
            lines.append("No log entries in current session.")
        else:
            lines.append(f"Showing {len(recent)} most recent entries:")
            lines.append("")
            lines.extend(format_report_line(entry) for entry in recent)

        lines.extend(
            [
                "",
                "=== End Session Log Report ===",
                "",
                "Please copy this entire report when submitting bug reports.",
                "Include steps to reproduce the issue and any error messages seen.",
            ]
        )
        report = "\n".join(lines)

        self._log_self(
            "export",
            INFO,
            "Report exported",
            {
                "report_size": len(report),
                "log_entries": len(recent),
                "session_duration": stats["session_duration"],
            },
        )
        return report
