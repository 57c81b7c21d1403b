"""buffer.py - Bounded, session-scoped store of structured log entries.

LogStore is the in-memory buffer that holds every LogEntry recorded during
the current session. It only grows through ``append()`` and only shrinks
through FIFO eviction or a full ``reset()``.

Design decisions:
    - ``collections.deque`` gives O(1) append and O(1) removal from the head.
      Eviction is done explicitly (rather than via ``maxlen``) so that the
      evicted entry can be handed back to the caller, which keeps the running
      statistics exact.
    - Entries are immutable once built. The ``data`` payload is stored by
      reference and never copied.
"""

from collections import deque
from typing import Any, Iterator, List, Optional

from .errors import InvalidArgument

DEFAULT_MAX_ENTRIES = 1000

INFO = "INFO"
WARN = "WARN"
ERROR = "ERROR"
DEBUG = "DEBUG"

LEVELS = (INFO, WARN, ERROR, DEBUG)


def normalize_level(level: str) -> str:
    """Return the canonical (uppercase) spelling of ``level``.

    Raises:
        InvalidArgument: If ``level`` is not one of INFO, WARN, ERROR, DEBUG
            in any letter case.
    """
    canonical = level.upper()
    if canonical not in LEVELS:
        raise InvalidArgument(f"unknown log level {level!r}")
    return canonical


class LogEntry:
    """A single immutable record held by a LogStore.

    Attributes:
        timestamp (int): Host clock value when the entry was created.
        session_time (int): Seconds since the session started, never negative.
        level (str): One of ``LEVELS``.
        category (str): Subsystem that produced the entry.
        message (str): Human-readable text.
        data: Optional nested payload (mapping, sequence or scalar), shared by
            reference with whoever supplied it.
    """

    __slots__ = ("timestamp", "session_time", "level", "category", "message", "data")

    def __init__(
        self,
        timestamp: int,
        session_time: int,
        level: str,
        category: str,
        message: str,
        data: Any = None,
    ) -> None:
        object.__setattr__(self, "timestamp", timestamp)
        object.__setattr__(self, "session_time", session_time)
        object.__setattr__(self, "level", level)
        object.__setattr__(self, "category", category)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "data", data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"LogEntry is immutable, cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"LogEntry is immutable, cannot delete {name!r}")

    def copy(self) -> "LogEntry":
        """Return a new entry with the same fields; ``data`` stays shared."""
        return LogEntry(
            self.timestamp,
            self.session_time,
            self.level,
            self.category,
            self.message,
            self.data,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"LogEntry({self.timestamp}, +{self.session_time}s, "
            f"{self.level}/{self.category}: {self.message!r})"
        )


class LogStore:
    """Capacity-bounded, insertion-ordered sequence of LogEntry objects.

    The store never holds more than ``max_entries`` entries. When an append
    would exceed that bound, exactly one entry (the oldest) is evicted.

    Example:
        >>> store = LogStore(max_entries=2)
        >>> for n in range(3):
        ...     store.append(LogEntry(n, n, "INFO", "Core", f"msg {n}"))
        >>> [e.message for e in store]
        ['msg 1', 'msg 2']
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        """Initialise an empty store.

        Args:
            max_entries: Maximum number of entries retained. Zero is allowed
                and means every append is immediately evicted.

        Raises:
            InvalidArgument: If ``max_entries`` is not a non-negative int.
        """
        if (
            not isinstance(max_entries, int)
            or isinstance(max_entries, bool)
            or max_entries < 0
        ):
            raise InvalidArgument(
                f"max_entries must be a non-negative int, got {max_entries!r}"
            )
        self._max_entries = max_entries
        self._entries: deque[LogEntry] = deque()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def append(self, entry: LogEntry) -> Optional[LogEntry]:
        """Insert ``entry`` at the tail, evicting the head if over capacity.

        Returns:
            The evicted entry, or None if nothing had to be removed.
        """
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            return self._entries.popleft()
        return None

    def snapshot(self) -> List[LogEntry]:
        """Return the entries oldest-first as a new list."""
        return list(self._entries)

    def reset(self) -> int:
        """Remove every entry and return how many were removed."""
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
