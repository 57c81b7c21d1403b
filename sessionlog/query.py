"""query.py - Filtered, most-recent-first retrieval from a LogStore."""

import math
from numbers import Real
from typing import Iterable, List, Optional

from .buffer import LogEntry
from .errors import InvalidArgument


def get_session_logs(
    entries: Iterable[LogEntry],
    level: Optional[str] = None,
    category: Optional[str] = None,
    count: Optional[float] = None,
) -> List[LogEntry]:
    """Return entries matching the filters, most recent first.

    Args:
        entries: Store contents in chronological order (oldest first).
        level: Keep only this level. Matched case-insensitively.
        category: Keep only this category. Matched exactly.
        count: Keep at most this many of the newest matches. ``None`` and
            ``0`` both mean no limit, as does infinity; fractional values are
            truncated.

    Returns:
        Copies of the matching entries, newest first. Entries with equal
        timestamps are ordered newest-inserted first. Each copy still shares its
        ``data`` payload with the stored entry.

    Raises:
        InvalidArgument: If ``level`` or ``category`` is given but is not a
            string, or if ``count`` is given but is not a non-negative number.
    """
    entries = list(entries)
    if not entries:
        return []

    if level is not None and not isinstance(level, str):
        raise InvalidArgument(f"level must be a string or None, got {level!r}")
    if category is not None and not isinstance(category, str):
        raise InvalidArgument(f"category must be a string or None, got {category!r}")
    if count is not None and (
        not isinstance(count, Real)
        or isinstance(count, bool)
        or count != count
        or count < 0
    ):
        raise InvalidArgument(f"count must be a non-negative number, got {count!r}")

    wanted_level = level.upper() if level is not None else None

    matches = [
        entry.copy()
        for entry in entries
        if (wanted_level is None or entry.level == wanted_level)
        and (category is None or entry.category == category)
    ]

    # Store order is chronological, so reversing first makes ties newest-first;
    # the stable sort keeps them that way.
    matches.reverse()
    matches.sort(key=lambda entry: entry.timestamp, reverse=True)

    if count and math.isfinite(count):
        matches = matches[: int(count)]
    return matches
