"""Tests for biblio_recommender.utils.time_utils."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from biblio_recommender.utils.time_utils import (
    in_window,
    parse_date,
    utcnow,
    window_bounds,
)


class TestWindowBounds:
    def test_inclusive_bounds(self):
        assert window_bounds(date(2025, 3, 15), 7) == (date(2025, 3, 8), date(2025, 3, 15))

    @pytest.mark.parametrize("days", [0, -1])
    def test_non_positive_raises(self, days):
        with pytest.raises(ValueError, match="window_days"):
            window_bounds(date(2025, 3, 15), days)


class TestInWindow:
    def test_bounds_included(self):
        start, end = date(2025, 3, 8), date(2025, 3, 15)
        assert in_window(start, start, end)
        assert in_window(end, start, end)
        assert not in_window(date(2025, 3, 7), start, end)
        assert not in_window(date(2025, 3, 16), start, end)

    def test_none_never_in_window(self):
        assert not in_window(None, date(2025, 1, 1), date(2025, 12, 31))


class TestParseDate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2025-01-02", date(2025, 1, 2)),
            (" 2025-01-02 ", date(2025, 1, 2)),
            ("2025-01-02T23:59:00Z", date(2025, 1, 2)),
            (date(2025, 1, 2), date(2025, 1, 2)),
            (datetime(2025, 1, 2, 8, 0, tzinfo=timezone.utc), date(2025, 1, 2)),
        ],
    )
    def test_parses(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize(
        "value",
        [
            None, "", "   ", "02/01/2025", "yesterday", 20250102,
            "2025-03-14garbage", "2025-03-14 not a date",
        ],
    )
    def test_unparsable_returns_none(self, value):
        assert parse_date(value) is None


def test_utcnow_is_aware():
    assert utcnow().tzinfo is not None
