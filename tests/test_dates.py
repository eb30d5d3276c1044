"""Tests for date parsing and day-granularity ranges."""

from datetime import date, datetime

import pytest

from pos_engine.dates import DateRange, parse_date
from pos_engine.exceptions import InvalidRangeError


def test_parse_date() -> None:
    assert parse_date("2023-01-15") == date(2023, 1, 15)


@pytest.mark.parametrize("value", ["15/01/2023", "2023-13-01", "yesterday", ""])
def test_parse_date_rejects_malformed(value: str) -> None:
    with pytest.raises(InvalidRangeError, match="YYYY-MM-DD"):
        parse_date(value)


class TestDateRange:
    def test_start_after_end(self) -> None:
        with pytest.raises(InvalidRangeError, match="after end date"):
            DateRange(date(2025, 1, 31), date(2025, 1, 1))

    def test_single_day_range(self) -> None:
        r = DateRange(date(2025, 1, 15), date(2025, 1, 15))

        assert r.contains(date(2025, 1, 15))
        assert not r.contains(date(2025, 1, 16))

    def test_open_bounds(self) -> None:
        assert DateRange().is_unbounded
        assert DateRange(start=date(2025, 1, 1)).contains(date(2099, 1, 1))
        assert DateRange(end=date(2025, 1, 1)).contains(date(1999, 1, 1))

    def test_contains_ignores_time_of_day(self) -> None:
        r = DateRange(end=date(2025, 1, 15))

        assert r.contains(datetime(2025, 1, 15, 23, 59, 59))
        assert not r.contains(datetime(2025, 1, 16, 0, 0, 1))

    def test_datetime_bounds_are_truncated(self) -> None:
        r = DateRange(datetime(2025, 1, 15, 18, 0), datetime(2025, 1, 15, 9, 0))

        assert r == DateRange(date(2025, 1, 15), date(2025, 1, 15))

    def test_string_bounds_are_parsed(self) -> None:
        r = DateRange("2025-01-01", "2025-01-31")  # type: ignore[arg-type]

        assert r == DateRange(date(2025, 1, 1), date(2025, 1, 31))
        assert r.sql_clause("created_at")[1] == ["2025-01-01", "2025-01-31"]

    def test_string_bounds_are_compared_as_dates(self) -> None:
        with pytest.raises(InvalidRangeError, match="after end date"):
            DateRange("2025-10-01", "2025-9-30")  # type: ignore[arg-type]

    @pytest.mark.parametrize("bound", ["01/02/2025", 20250101, 1.5])
    def test_invalid_bound(self, bound: object) -> None:
        with pytest.raises(InvalidRangeError):
            DateRange(start=bound)  # type: ignore[arg-type]

    def test_from_strings(self) -> None:
        assert DateRange.from_strings("2025-01-01", "2025-01-31") == DateRange(
            date(2025, 1, 1), date(2025, 1, 31)
        )
        assert DateRange.from_strings(None, "") == DateRange()

    def test_from_strings_rejects_inverted(self) -> None:
        with pytest.raises(InvalidRangeError):
            DateRange.from_strings("2025-02-01", "2025-01-01")

    def test_sql_clause(self) -> None:
        clause, params = DateRange(date(2025, 1, 1), date(2025, 1, 31)).sql_clause("o.created_at")

        assert clause == " AND DATE(o.created_at) >= DATE(?) AND DATE(o.created_at) <= DATE(?)"
        assert params == ["2025-01-01", "2025-01-31"]
        assert DateRange().sql_clause("created_at") == ("", [])


class TestPresets:
    TODAY = date(2025, 1, 15)

    def test_today(self) -> None:
        assert DateRange.preset("today", self.TODAY) == DateRange(self.TODAY, self.TODAY)

    def test_week(self) -> None:
        assert DateRange.preset("week", self.TODAY) == DateRange(date(2025, 1, 8), self.TODAY)

    def test_month(self) -> None:
        assert DateRange.preset("month", self.TODAY) == DateRange(date(2024, 12, 16), self.TODAY)

    def test_all(self) -> None:
        assert DateRange.preset("all", self.TODAY).is_unbounded

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="Invalid preset"):
            DateRange.preset("year", self.TODAY)
