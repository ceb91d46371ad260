"""Calendar helpers for local-calendar ISO date strings (YYYY-MM-DD).

Dates cross module boundaries as strings so they compare lexicographically
and serialize as-is; ``datetime.date`` is only used for arithmetic.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from accountability.clock import Clock
from accountability.errors import InvalidDateRange

# Indexed by date.weekday(): Monday == 0
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


@dataclass(frozen=True)
class WeekBounds:
    start: str  # Monday
    end: str  # Sunday


def today(clock: Clock) -> str:
    """Today's date string according to *clock*."""
    return to_date_string(clock.today())


def to_date_string(d: date | datetime) -> str:
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()


def parse_date_string(s: str) -> date:
    """Parse 'YYYY-MM-DD' (or the date part of an ISO timestamp)."""
    if not isinstance(s, str):
        raise ValueError(f"Invalid date: {s!r}")
    text = s.strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid date: {s!r}") from None


def normalize_date(s: str) -> str:
    """Reduce a date or timestamp string to its 'YYYY-MM-DD' form."""
    return to_date_string(parse_date_string(s))


def day_of_week(s: str) -> str:
    return DAY_NAMES[parse_date_string(s).weekday()]


def week_boundaries(s: str) -> WeekBounds:
    """Monday and Sunday (inclusive) of the week containing *s*."""
    d = parse_date_string(s)
    monday = d - timedelta(days=d.weekday())
    return WeekBounds(start=to_date_string(monday), end=to_date_string(monday + timedelta(days=6)))


def add_days(s: str, n: int) -> str:
    return to_date_string(parse_date_string(s) + timedelta(days=n))


def days_between(start: str, end: str) -> int:
    """Signed number of days from *start* to *end*."""
    return (parse_date_string(end) - parse_date_string(start)).days


def iter_dates(start: str, end: str) -> Iterator[str]:
    """Yield every date from *start* to *end* inclusive.

    Raises InvalidDateRange when start is after end.
    """
    first = parse_date_string(start)
    last = parse_date_string(end)
    if first > last:
        raise InvalidDateRange(start, end)
    return _walk(first, last)


def _walk(first: date, last: date) -> Iterator[str]:
    current = first
    while current <= last:
        yield to_date_string(current)
        current += timedelta(days=1)


def date_range(start: str, end: str) -> list[str]:
    """All dates from *start* to *end* inclusive, in order."""
    return list(iter_dates(start, end))


def format_date_range(start: str, end: str) -> str:
    """Display text for a round period.

    'Jan 1 - 31, 2026', 'Jan 1 - Feb 15, 2026', 'Dec 1, 2025 - Jan 15, 2026'.
    """
    s = parse_date_string(start)
    e = parse_date_string(end)
    s_month = s.strftime("%b")
    e_month = e.strftime("%b")
    if s.year == e.year and s.month == e.month:
        return f"{s_month} {s.day} - {e.day}, {e.year}"
    if s.year == e.year:
        return f"{s_month} {s.day} - {e_month} {e.day}, {e.year}"
    return f"{s_month} {s.day}, {s.year} - {e_month} {e.day}, {e.year}"
