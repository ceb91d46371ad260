"""Clock abstraction so "today" is always an explicit input."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in the user's zone."""

    def __init__(self, tz: ZoneInfo | None = None) -> None:
        self.tz = tz or ZoneInfo("UTC")

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def __repr__(self) -> str:
        return f"SystemClock({self.tz.key!r})"


class FixedClock:
    """A clock pinned to one calendar day (and optionally a time of day)."""

    def __init__(self, day: date | str, at: time | None = None, tz: ZoneInfo | None = None) -> None:
        self.day = date.fromisoformat(day) if isinstance(day, str) else day
        self.at = at or time(12, 0)
        self.tz = tz or ZoneInfo("UTC")

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        return datetime.combine(self.day, self.at, tzinfo=self.tz)

    def __repr__(self) -> str:
        return f"FixedClock({self.day.isoformat()!r})"
