"""Frequency applicability rules and weekly quota bookkeeping."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from accountability.dates import add_days, day_of_week, iter_dates, week_boundaries
from accountability.models import Daily, Frequency, GoalProgress, SpecificDays, TimesPerWeek

SHORT_DAY = {
    "monday": "Mon",
    "tuesday": "Tue",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
    "saturday": "Sat",
    "sunday": "Sun",
}


def _unknown(frequency: object) -> TypeError:
    return TypeError(f"Unknown frequency: {frequency!r}")


def is_applicable(date: str, frequency: Frequency) -> bool:
    """Whether *date* is in scope for a goal with *frequency*.

    Times-per-week goals accept any day; the quota is judged per week elsewhere.
    """
    if isinstance(frequency, Daily):
        return True
    if isinstance(frequency, SpecificDays):
        return day_of_week(date) in frequency.days
    if isinstance(frequency, TimesPerWeek):
        return True
    raise _unknown(frequency)


def next_applicable_date(frequency: Frequency, after: str, until: str) -> str | None:
    """First applicable date strictly after *after* and not past *until*."""
    start = add_days(after, 1)
    if start > until:
        return None
    for d in iter_dates(start, until):
        if is_applicable(d, frequency):
            return d
    return None


def not_applicable_reason(frequency: Frequency) -> str:
    if isinstance(frequency, SpecificDays):
        names = [d.capitalize() for d in frequency.ordered_days()]
        if not names:
            return "This goal has no scheduled days"
        return f"This goal is only for: {', '.join(names)}"
    if isinstance(frequency, (Daily, TimesPerWeek)):
        return "Today is not applicable for this goal"
    raise _unknown(frequency)


def describe_frequency(frequency: Frequency) -> str:
    """Short display label: 'Every day', '3x per week', 'Mon, Wed, Fri'."""
    if isinstance(frequency, Daily):
        return "Every day"
    if isinstance(frequency, TimesPerWeek):
        return f"{frequency.count}x per week"
    if isinstance(frequency, SpecificDays):
        days = frequency.ordered_days()
        return ", ".join(SHORT_DAY[d] for d in days) if days else "No days"
    raise _unknown(frequency)


# ── Weekly quota ──────────────────────────────────────────────


@dataclass(frozen=True)
class WeeklyQuota:
    count: int
    required: int
    week_start: str
    week_end: str

    @property
    def is_met(self) -> bool:
        return self.count >= self.required


def count_in_window(progress: Iterable[GoalProgress], start: str, end: str) -> int:
    return sum(1 for p in progress if start <= p.target_date <= end)


def weekly_quota(frequency: TimesPerWeek, progress: Iterable[GoalProgress], date: str) -> WeeklyQuota:
    """Progress count for the Monday-Sunday week containing *date*."""
    bounds = week_boundaries(date)
    return WeeklyQuota(
        count=count_in_window(progress, bounds.start, bounds.end),
        required=frequency.count,
        week_start=bounds.start,
        week_end=bounds.end,
    )
