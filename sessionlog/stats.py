"""stats.py - Running per-session counters over a LogStore.

StatsAggregator keeps three counters in step with the store: the total
number of entries, a count per level and a count per category. The counters
are maintained incrementally (``update`` on append, ``discard`` on eviction)
and can always be rebuilt from scratch with ``recompute``. The incremental
and recomputed forms must compare equal for any store state; ``recompute``
is the definition of correct.
"""

from typing import Dict, Iterable

from .buffer import LogEntry


class StatsAggregator:
    """Total, by-level and by-category entry counts for one session.

    Example:
        >>> stats = StatsAggregator()
        >>> stats.update(LogEntry(0, 0, "INFO", "Core", "ready"))
        >>> stats.total, stats.by_level
        (1, {'INFO': 1})
    """

    __slots__ = ("total", "by_level", "by_category")

    def __init__(self) -> None:
        self.total = 0
        self.by_level: Dict[str, int] = {}
        self.by_category: Dict[str, int] = {}

    def update(self, entry: LogEntry) -> None:
        """Count a newly appended entry. O(1)."""
        self.total += 1
        self.by_level[entry.level] = self.by_level.get(entry.level, 0) + 1
        self.by_category[entry.category] = self.by_category.get(entry.category, 0) + 1

    def discard(self, entry: LogEntry) -> None:
        """Uncount an entry evicted from the store. O(1).

        Keys whose count drops to zero are removed so that the result matches
        what ``recompute`` would produce.
        """
        self.total -= 1
        _decrement(self.by_level, entry.level)
        _decrement(self.by_category, entry.category)

    def copy(self) -> "StatsAggregator":
        other = StatsAggregator()
        other.total = self.total
        other.by_level = dict(self.by_level)
        other.by_category = dict(self.by_category)
        return other

    def reset(self) -> None:
        self.total = 0
        self.by_level = {}
        self.by_category = {}

    @classmethod
    def recompute(cls, entries: Iterable[LogEntry]) -> "StatsAggregator":
        """Build a fresh aggregate by scanning ``entries``."""
        stats = cls()
        for entry in entries:
            stats.update(entry)
        return stats

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatsAggregator):
            return NotImplemented
        return (
            self.total == other.total
            and self.by_level == other.by_level
            and self.by_category == other.by_category
        )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"StatsAggregator(total={self.total}, by_level={self.by_level}, "
            f"by_category={self.by_category})"
        )


def _decrement(counts: Dict[str, int], key: str) -> None:
    remaining = counts.get(key, 0) - 1
    if remaining > 0:
        counts[key] = remaining
    else:
        counts.pop(key, None)
