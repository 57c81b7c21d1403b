"""formatting.py - Text renderings of entries, durations and sizes.

Every function here is pure and returns a plain string; nothing is printed.
Three line shapes exist for entries, one per consumer:

    display   ``[INFO] +1m5s Loot    : Item awarded | {item="Sword"}``
    flush     ``[2024-01-15 12:34:56] +65s INFO/Loot: Item awarded | Data: {...}``
    report    ``[12:34:56] INFO [Loot] Item awarded ({...})``
"""

from datetime import datetime, timezone

from .buffer import LogEntry
from .serialize import serialize

CATEGORY_WIDTH = 8
DISPLAY_DATA_LIMIT = 100


def format_timestamp(timestamp: int, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """Render a host clock value (epoch seconds) in UTC.

    Values outside the range ``datetime`` can represent come back as
    ``str(timestamp)``.
    """
    try:
        moment = datetime.fromtimestamp(timestamp, timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(timestamp)
    return moment.strftime(fmt)


def format_session_time(seconds: int) -> str:
    """Render a session offset as ``+Ns``, ``+NmNs`` or ``+NhNm``.

    Negative offsets render as an empty string.
    """
    if seconds < 0:
        return ""
    seconds = int(seconds)
    if seconds < 60:
        return f"+{seconds}s"
    if seconds < 3600:
        return f"+{seconds // 60}m{seconds % 60}s"
    return f"+{seconds // 3600}h{seconds % 3600 // 60}m"


def format_duration(seconds: int) -> str:
    """Render a duration in words.

    Example:
        >>> format_duration(125)
        '2 minutes, 5 seconds'
    """
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        return f"{seconds // 60} minutes, {seconds % 60} seconds"
    return f"{seconds // 3600} hours, {seconds % 3600 // 60} minutes"


def format_bytes(size: int) -> str:
    """Render a byte count as B, KB or MB."""
    if size < 1024:
        return f"{int(size)} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _fixed_width_category(category: str) -> str:
    if len(category) > CATEGORY_WIDTH:
        return category[: CATEGORY_WIDTH - 1] + "+"
    return category.ljust(CATEGORY_WIDTH)


def format_entry_for_display(entry: LogEntry) -> str:
    """Render ``entry`` as one line for an interactive log view.

    The category is padded or cut to a fixed width so that messages line up,
    and the serialized payload is capped at ``DISPLAY_DATA_LIMIT`` characters.
    """
    line = (
        f"[{entry.level}] {format_session_time(entry.session_time)} "
        f"{_fixed_width_category(entry.category)}: {entry.message}"
    )
    if entry.data is not None:
        data = serialize(entry.data)
        if data:
            if len(data) > DISPLAY_DATA_LIMIT:
                data = data[: DISPLAY_DATA_LIMIT - 3] + "..."
            line += f" | {data}"
    return line


def format_flush_line(entry: LogEntry) -> str:
    """Render ``entry`` as one line of a persisted log blob."""
    line = (
        f"[{format_timestamp(entry.timestamp)}] +{entry.session_time}s "
        f"{entry.level}/{entry.category}: {entry.message}"
    )
    if entry.data is not None:
        data = serialize(entry.data)
        if data is not None:
            line += f" | Data: {data}"
    return line


def format_report_line(entry: LogEntry) -> str:
    """Render ``entry`` as one line of an exported report."""
    line = (
        f"[{format_timestamp(entry.timestamp, '%H:%M:%S')}] "
        f"{entry.level} [{entry.category}] {entry.message}"
    )
    if entry.data is not None:
        data = serialize(entry.data)
        if data:
            line += f" ({data})"
    return line
