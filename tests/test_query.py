"""test_query.py - Unit tests for get_session_logs().

Covers:
    - Empty input short-circuits (even before argument validation)
    - Level filter is case-insensitive, category filter is exact
    - Results are most recent first, ties newest-inserted first
    - count truncation keeps the newest matches; 0 and infinity mean no limit
    - Argument validation raises InvalidArgument
    - Results are copies that still share the data payload
"""

import math

import pytest

from sessionlog.buffer import LogEntry
from sessionlog.errors import InvalidArgument
from sessionlog.query import get_session_logs


def _entries(pairs):
    """Build entries with increasing timestamps from (level, category) pairs."""
    return [
        LogEntry(100 + n, n, level, category, f"message {n}")
        for n, (level, category) in enumerate(pairs)
    ]


# ---------------------------------------------------------------------------
# Filtering and ordering
# ---------------------------------------------------------------------------


class TestQueryFiltering:
    def test_query_empty_store_returns_empty_list(self):
        assert get_session_logs([]) == []

    def test_query_empty_store_skips_validation(self):
        assert get_session_logs([], level=5, count=-1) == []

    def test_query_level_filter_returns_matches_newest_first(self):
        """3 ERROR among 5 INFO entries come back alone, most recent first."""
        pairs = [
            ("INFO", "Core"),
            ("ERROR", "Core"),
            ("INFO", "Core"),
            ("ERROR", "Sync"),
            ("INFO", "Core"),
            ("INFO", "Loot"),
            ("ERROR", "Loot"),
            ("INFO", "Core"),
        ]
        result = get_session_logs(_entries(pairs), level="ERROR")

        assert len(result) == 3
        assert all(e.level == "ERROR" for e in result)
        assert [e.timestamp for e in result] == [106, 103, 101]

    def test_query_level_filter_is_case_insensitive(self):
        entries = _entries([("WARN", "Core"), ("INFO", "Core")])
        assert [e.level for e in get_session_logs(entries, level="warn")] == ["WARN"]

    def test_query_category_filter_is_exact(self):
        entries = _entries([("INFO", "Core"), ("INFO", "core"), ("INFO", "Loot")])
        result = get_session_logs(entries, category="Core")
        assert [e.category for e in result] == ["Core"]

    def test_query_combines_level_and_category(self):
        entries = _entries([("INFO", "Core"), ("ERROR", "Core"), ("ERROR", "Loot")])
        result = get_session_logs(entries, level="error", category="Loot")
        assert [(e.level, e.category) for e in result] == [("ERROR", "Loot")]

    def test_query_without_filters_reverses_order(self):
        entries = _entries([("INFO", "Core")] * 4)
        assert [e.timestamp for e in get_session_logs(entries)] == [103, 102, 101, 100]

    def test_query_equal_timestamps_newest_inserted_first(self):
        entries = [LogEntry(500, 0, "INFO", "Core", f"m{n}") for n in range(3)]
        assert [e.message for e in get_session_logs(entries)] == ["m2", "m1", "m0"]


# ---------------------------------------------------------------------------
# count
# ---------------------------------------------------------------------------


class TestQueryCount:
    def test_query_count_keeps_newest(self):
        entries = _entries([("INFO", "Core")] * 6)
        result = get_session_logs(entries, count=2)
        assert [e.timestamp for e in result] == [105, 104]

    def test_query_count_larger_than_matches_returns_all(self):
        entries = _entries([("INFO", "Core")] * 3)
        assert len(get_session_logs(entries, count=10)) == 3

    def test_query_count_zero_means_no_limit(self):
        entries = _entries([("INFO", "Core")] * 3)
        assert len(get_session_logs(entries, count=0)) == 3

    def test_query_fractional_count_is_truncated(self):
        entries = _entries([("INFO", "Core")] * 5)
        assert len(get_session_logs(entries, count=2.9)) == 2

    def test_query_infinite_count_means_no_limit(self):
        entries = _entries([("INFO", "Core")] * 4)
        assert len(get_session_logs(entries, count=math.inf)) == 4


# ---------------------------------------------------------------------------
# Validation and copies
# ---------------------------------------------------------------------------


class TestQueryValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"level": 5},
            {"category": 3},
            {"count": -1},
            {"count": "3"},
            {"count": True},
            {"count": math.nan},
        ],
    )
    def test_query_rejects_bad_arguments(self, kwargs):
        entries = _entries([("INFO", "Core")])
        with pytest.raises(InvalidArgument):
            get_session_logs(entries, **kwargs)

    def test_query_returns_copies_sharing_data(self):
        """Scalar fields are copied; the data payload is the same object."""
        data = {"nested": {"value": 1}}
        stored = LogEntry(1, 0, "INFO", "Core", "hi", data)

        (result,) = get_session_logs([stored])

        assert result is not stored
        assert result.message == stored.message
        assert result.data is data
