"""serialize.py - Bounded rendering and size estimation for entry payloads.

Both helpers walk arbitrary nested data attached to a LogEntry. Payloads are
treated as a small closed set of shapes:

    None         absent payload
    scalar       str, bool, int, float, or anything else (rendered via str())
    mapping      any ``collections.abc.Mapping``; keys are rendered via str()
    sequence     list, tuple, set or frozenset; keys are the element indices

Walks are cut off at ``MAX_DEPTH`` nesting levels and a fixed number of
entries per level, so a huge or self-referencing payload costs a bounded
amount of work. The width limits differ on purpose: display output is
trimmed harder (10) than memory estimation (20).
"""

from collections.abc import Mapping
from typing import Any, Iterator, Optional, Tuple

MAX_DEPTH = 3
SERIALIZE_MAX_WIDTH = 10
ESTIMATE_MAX_WIDTH = 20

ELLIPSIS = "..."
SERIALIZATION_ERROR = "serialization_error"

# Cost assigned to containers below MAX_DEPTH and to entries past the width
# limit, since neither is walked.
DEEP_CONTAINER_COST = 50
OVERFLOW_ENTRIES_COST = 100
CONTAINER_OVERHEAD = 16
UNKNOWN_VALUE_COST = 8

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or isinstance(value, _SEQUENCE_TYPES)


def _items(value: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return iter(value.items())
    return enumerate(value)


def serialize(value: Any) -> Optional[str]:
    """Render ``value`` as a bounded, human-readable string.

    Scalars come back as ``str(value)``. Containers render as
    ``{key=value, ...}`` with nested strings quoted. A container nested
    ``MAX_DEPTH`` levels below the top renders as ``...`` and a level with
    more than ``SERIALIZE_MAX_WIDTH`` entries keeps the first ten followed by
    a single ``...`` marker.

    Never raises: any failure while rendering yields ``"serialization_error"``.

    Returns:
        The rendering, or None when ``value`` is None.

    Example:
        >>> serialize({"user": "ana", "retry": {"attempt": 2}})
        '{user="ana", retry={attempt=2}}'
    """
    if value is None:
        return None
    try:
        if not _is_container(value):
            return str(value)
        return _render_container(value, 0)
    except Exception:
        return SERIALIZATION_ERROR


def _render_container(value: Any, depth: int) -> str:
    parts = []
    for count, (key, item) in enumerate(_items(value)):
        if count >= SERIALIZE_MAX_WIDTH:
            parts.append(ELLIPSIS)
            break
        parts.append(f"{key}={_render_value(item, depth + 1)}")
    return "{" + ", ".join(parts) + "}"


def _render_value(value: Any, depth: int) -> str:
    if _is_container(value):
        if depth >= MAX_DEPTH:
            return ELLIPSIS
        return _render_container(value, depth)
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def estimate_size(value: Any) -> int:
    """Estimate the in-memory footprint of ``value`` in bytes.

    Scalar costs: string -> its length, bool -> 1, number -> 8, anything
    else -> 8. A container costs 16 plus, for each of its first
    ``ESTIMATE_MAX_WIDTH`` entries, the key cost (string length, or 8 for a
    non-string key) and the value cost. Remaining entries add a flat 100 and
    containers ``MAX_DEPTH`` levels down add a flat 50 without being walked.

    Never raises: a payload that fails while being walked costs a flat 8.
    """
    if value is None:
        return 0
    try:
        if _is_container(value):
            return _estimate_container(value, 0)
        return _estimate_scalar(value)
    except Exception:
        return UNKNOWN_VALUE_COST


def _estimate_scalar(value: Any) -> int:
    if isinstance(value, str):
        return len(value)
    if isinstance(value, bool):
        return 1
    return UNKNOWN_VALUE_COST


def _estimate_container(value: Any, depth: int) -> int:
    if depth >= MAX_DEPTH:
        return DEEP_CONTAINER_COST
    size = CONTAINER_OVERHEAD
    for count, (key, item) in enumerate(_items(value)):
        if count >= ESTIMATE_MAX_WIDTH:
            size += OVERFLOW_ENTRIES_COST
            break
        size += len(key) if isinstance(key, str) else UNKNOWN_VALUE_COST
        if _is_container(item):
            size += _estimate_container(item, depth + 1)
        else:
            size += _estimate_scalar(item)
    return size


def estimate_entry_size(entry) -> int:
    """Estimate the footprint of a whole LogEntry, payload included."""
    size = 16 + len(entry.level) + len(entry.category) + len(entry.message)
    if entry.data is not None:
        size += estimate_size(entry.data)
    return size
