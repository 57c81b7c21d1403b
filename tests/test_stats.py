"""test_stats.py - Unit tests for StatsAggregator.

Covers:
    - update() increments total, level and category counters
    - discard() reverses update() and drops zeroed keys
    - recompute() matches incremental maintenance through evictions
    - copy() independence and equality semantics
"""

from sessionlog.buffer import LogEntry, LogStore
from sessionlog.stats import StatsAggregator


def _entry(level: str, category: str) -> LogEntry:
    return LogEntry(0, 0, level, category, "msg")


# ---------------------------------------------------------------------------
# Incremental maintenance
# ---------------------------------------------------------------------------


class TestStatsIncremental:
    def test_stats_initially_empty(self):
        stats = StatsAggregator()
        assert (stats.total, stats.by_level, stats.by_category) == (0, {}, {})

    def test_stats_update_counts_level_and_category(self):
        stats = StatsAggregator()
        stats.update(_entry("INFO", "Core"))
        stats.update(_entry("INFO", "Loot"))
        stats.update(_entry("ERROR", "Core"))

        assert stats.total == 3
        assert stats.by_level == {"INFO": 2, "ERROR": 1}
        assert stats.by_category == {"Core": 2, "Loot": 1}

    def test_stats_discard_removes_zeroed_keys(self):
        stats = StatsAggregator()
        entry = _entry("WARN", "Sync")
        stats.update(entry)
        stats.discard(entry)

        assert stats == StatsAggregator()

    def test_stats_reset_clears_everything(self):
        stats = StatsAggregator()
        stats.update(_entry("INFO", "Core"))
        stats.reset()
        assert stats == StatsAggregator()


# ---------------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------------


class TestStatsRecompute:
    def test_stats_incremental_matches_recompute_through_evictions(self):
        """Incremental counters equal a full recount after every append."""
        store = LogStore(max_entries=4)
        stats = StatsAggregator()
        levels = ["INFO", "WARN", "ERROR", "DEBUG", "INFO"]
        categories = ["Core", "Loot", "Sync"]

        for n in range(17):
            entry = _entry(levels[n % len(levels)], categories[n % len(categories)])
            evicted = store.append(entry)
            stats.update(entry)
            if evicted is not None:
                stats.discard(evicted)

            assert stats == StatsAggregator.recompute(store)

        assert stats.total == len(store) == 4
        assert sum(stats.by_level.values()) == 4
        assert sum(stats.by_category.values()) == 4

    def test_stats_recompute_of_empty_store(self):
        assert StatsAggregator.recompute([]) == StatsAggregator()


# ---------------------------------------------------------------------------
# copy / equality
# ---------------------------------------------------------------------------


class TestStatsCopy:
    def test_stats_copy_is_independent(self):
        stats = StatsAggregator()
        stats.update(_entry("INFO", "Core"))
        clone = stats.copy()
        clone.update(_entry("INFO", "Core"))

        assert stats.by_level == {"INFO": 1}
        assert clone.by_level == {"INFO": 2}

    def test_stats_not_equal_to_other_types(self):
        assert StatsAggregator() != object()
