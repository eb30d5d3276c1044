"""Date parsing and day-granularity date ranges.

Every report and the repository's read path filter orders by the calendar
date of ``created_at``; time of day is ignored. Both bounds are inclusive and
either may be omitted.

Examples:
    >>> from datetime import date
    >>> r = DateRange.from_strings("2025-01-01", "2025-01-31")
    >>> r.contains(date(2025, 1, 31))
    True
    >>> DateRange.preset("week", today=date(2025, 1, 15))
    DateRange(start=datetime.date(2025, 1, 8), end=datetime.date(2025, 1, 15))

"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from pos_engine.exceptions import InvalidRangeError

PRESETS = ("today", "week", "month", "all")


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Raises:
        InvalidRangeError: If the string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2023-01-15")
        datetime.date(2023, 1, 15)

    """
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise InvalidRangeError(f"Invalid date {s!r}: expected YYYY-MM-DD") from e


def _coerce_bound(value: object) -> date | None:
    if value is None:
        return None
    # datetime is a date subclass; keep only the calendar date
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise InvalidRangeError(f"Invalid date bound {value!r}: expected a date or YYYY-MM-DD")


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range. ``None`` means unbounded on that side."""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _coerce_bound(self.start))
        object.__setattr__(self, "end", _coerce_bound(self.end))
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidRangeError(
                f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    @classmethod
    def from_strings(cls, start: str | None = None, end: str | None = None) -> DateRange:
        """Build a range from YYYY-MM-DD strings; empty or None means unbounded."""
        return cls(
            start=parse_date(start) if start else None,
            end=parse_date(end) if end else None,
        )

    @classmethod
    def preset(cls, name: str, today: date | None = None) -> DateRange:
        """Build one of the named ranges offered on the reports screen.

        Args:
            name: "today", "week" (last 7 days through today), "month"
                (last 30 days through today) or "all".
            today: Reference day (defaults to the local current date).

        Raises:
            ValueError: If name is not a known preset.

        """
        if name not in PRESETS:
            raise ValueError(f"Invalid preset '{name}'. Must be one of {', '.join(PRESETS)}.")
        today = today or date.today()
        if name == "today":
            return cls(today, today)
        elif name == "week":
            return cls(today - timedelta(days=7), today)
        elif name == "month":
            return cls(today - timedelta(days=30), today)
        else:  # all
            return cls()

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        """Return True if the calendar date of ``day`` lies within the range."""
        if isinstance(day, datetime):
            day = day.date()
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def sql_clause(self, column: str) -> tuple[str, list[str]]:
        """Return an ``AND ...`` SQL fragment and its parameters for ``column``."""
        clause = ""
        params: list[str] = []
        if self.start is not None:
            clause += f" AND DATE({column}) >= DATE(?)"
            params.append(self.start.isoformat())
        if self.end is not None:
            clause += f" AND DATE({column}) <= DATE(?)"
            params.append(self.end.isoformat())
        return clause, params

    def describe(self) -> str:
        start = self.start.isoformat() if self.start else "beginning"
        end = self.end.isoformat() if self.end else "now"
        return f"{start} to {end}"
