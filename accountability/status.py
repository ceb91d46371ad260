"""Per-date goal status classification and the amendable window.

Daily and specific-days goals are judged date by date. Times-per-week goals
are judged week by week: an unlogged date only fails once its Monday-Sunday
week is over without the quota being met.
"""

from __future__ import annotations

from collections.abc import Iterable

from accountability.clock import Clock
from accountability.dates import add_days, date_range, to_date_string, week_boundaries
from accountability.frequency import count_in_window, is_applicable
from accountability.models import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_NOT_APPLICABLE,
    STATUS_PENDING,
    Daily,
    DayStatus,
    Goal,
    GoalProgress,
    SpecificDays,
    TimesPerWeek,
)


def index_by_target_date(progress: Iterable[GoalProgress]) -> dict[str, GoalProgress]:
    """Map target date -> first progress entry logged for it."""
    index: dict[str, GoalProgress] = {}
    for p in progress:
        index.setdefault(p.target_date, p)
    return index


def group_by_week(dates: Iterable[str]) -> list[tuple[str, list[str]]]:
    """Partition ordered dates into (monday, dates) groups, in order."""
    groups: dict[str, list[str]] = {}
    for d in dates:
        groups.setdefault(week_boundaries(d).start, []).append(d)
    return list(groups.items())


# ── Classifier ────────────────────────────────────────────────


def classify(
    goal: Goal,
    progress: list[GoalProgress],
    start: str,
    end: str,
    clock: Clock,
) -> list[DayStatus]:
    """One DayStatus per date from *start* to *end* inclusive.

    *progress* is the goal's own entries. Raises InvalidDateRange if start > end.
    """
    today = to_date_string(clock.today())
    dates = date_range(start, end)
    by_date = index_by_target_date(progress)
    frequency = goal.frequency

    if isinstance(frequency, TimesPerWeek):
        return _classify_weekly(frequency, progress, by_date, dates, today)
    if isinstance(frequency, (Daily, SpecificDays)):
        return [_classify_day(frequency, by_date, d, today) for d in dates]
    raise TypeError(f"Unknown frequency: {frequency!r}")


def _classify_day(
    frequency: Daily | SpecificDays,
    by_date: dict[str, GoalProgress],
    date: str,
    today: str,
) -> DayStatus:
    if not is_applicable(date, frequency):
        return DayStatus(date, STATUS_NOT_APPLICABLE)
    entry = by_date.get(date)
    if entry is not None:
        return DayStatus(date, STATUS_COMPLETED, entry.id)
    if date < today:
        return DayStatus(date, STATUS_FAILED)
    return DayStatus(date, STATUS_PENDING)


def _classify_weekly(
    frequency: TimesPerWeek,
    progress: list[GoalProgress],
    by_date: dict[str, GoalProgress],
    dates: list[str],
    today: str,
) -> list[DayStatus]:
    statuses: list[DayStatus] = []
    for week_start, week_dates in group_by_week(dates):
        week_end = add_days(week_start, 6)
        # The whole week counts, including days outside the requested range
        week_count = count_in_window(progress, week_start, week_end)
        week_failed = week_end < today and week_count < frequency.count
        for d in week_dates:
            entry = by_date.get(d)
            if entry is not None:
                statuses.append(DayStatus(d, STATUS_COMPLETED, entry.id))
            elif week_failed:
                statuses.append(DayStatus(d, STATUS_FAILED))
            else:
                statuses.append(DayStatus(d, STATUS_PENDING))
    return statuses


def failed_dates(goal: Goal, progress: list[GoalProgress], start: str, end: str, clock: Clock) -> list[str]:
    return [s.date for s in classify(goal, progress, start, end, clock) if s.status == STATUS_FAILED]


def completed_dates(goal: Goal, progress: list[GoalProgress], start: str, end: str, clock: Clock) -> list[str]:
    return [s.date for s in classify(goal, progress, start, end, clock) if s.status == STATUS_COMPLETED]


def today_status(
    goal: Goal,
    progress: list[GoalProgress],
    round_start: str,
    round_end: str,
    clock: Clock,
) -> str:
    """Status of today only: outside the round or off-schedule is not_applicable."""
    today = to_date_string(clock.today())
    if today < round_start or today > round_end:
        return STATUS_NOT_APPLICABLE
    if not is_applicable(today, goal.frequency):
        return STATUS_NOT_APPLICABLE
    if any(p.target_date == today for p in progress):
        return STATUS_COMPLETED
    return STATUS_PENDING


# ── Amendable window ──────────────────────────────────────────


def amendable_dates(
    goal: Goal,
    progress: list[GoalProgress],
    round_start: str,
    round_end: str,
    clock: Clock,
) -> list[str]:
    """Failed dates that may still be logged retroactively.

    Window is round_start .. min(yesterday, round_end); never today or later.
    A failed times-per-week week is reported once, by its latest unlogged
    date inside the window.
    """
    today = to_date_string(clock.today())
    window_end = min(add_days(today, -1), round_end)
    if window_end < round_start:
        return []

    statuses = classify(goal, progress, round_start, window_end, clock)
    failed = [s.date for s in statuses if s.status == STATUS_FAILED]

    if isinstance(goal.frequency, TimesPerWeek):
        return [week_dates[-1] for _week, week_dates in group_by_week(failed)]
    return failed
