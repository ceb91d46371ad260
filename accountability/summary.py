"""Goal- and round-level progress statistics for display."""

from __future__ import annotations

from accountability.clock import Clock
from accountability.dates import add_days, day_of_week, days_between, iter_dates, to_date_string
from accountability.gate import can_log_today
from accountability.models import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    Daily,
    Frequency,
    Goal,
    GoalProgress,
    GoalProgressSummary,
    GoalStatusResult,
    Round,
    RoundProgressSummary,
    SpecificDays,
    TimesPerWeek,
)
from accountability.status import amendable_dates, classify, today_status


def elapsed_days(start: str, clock: Clock) -> int:
    """Days from *start* through today inclusive; 0 before the start."""
    return max(0, days_between(start, to_date_string(clock.today())) + 1)


def total_days(start: str, end: str) -> int:
    return days_between(start, end) + 1


def expected_count(frequency: Frequency, start: str, days_elapsed: int) -> int:
    """How many completions should exist after *days_elapsed* days.

    Times-per-week goals expect the full weekly quota during their first,
    partial week and the prorated quota after that.
    """
    if days_elapsed <= 0:
        return 0
    if isinstance(frequency, Daily):
        return days_elapsed
    if isinstance(frequency, SpecificDays):
        last = add_days(start, days_elapsed - 1)
        return sum(1 for d in iter_dates(start, last) if day_of_week(d) in frequency.days)
    if isinstance(frequency, TimesPerWeek):
        if days_elapsed < 7:
            return frequency.count
        return days_elapsed * frequency.count // 7
    raise TypeError(f"Unknown frequency: {frequency!r}")


def completion_percentage(completed: int, expected: int) -> float:
    if expected <= 0:
        return 0.0
    return min(100.0, completed / expected * 100)


def _status_window_end(round_end: str, clock: Clock) -> str:
    return min(to_date_string(clock.today()), round_end)


def summarize_goal(goal: Goal, progress: list[GoalProgress], round: Round, clock: Clock) -> GoalProgressSummary:
    """Statistics for one goal; *progress* holds that goal's entries."""
    completed = len(progress)
    expected = expected_count(goal.frequency, round.start_date, elapsed_days(round.start_date, clock))

    window_end = _status_window_end(round.end_date, clock)
    failed = 0
    if window_end >= round.start_date:
        statuses = classify(goal, progress, round.start_date, window_end, clock)
        failed = sum(1 for s in statuses if s.status == STATUS_FAILED)

    gate = can_log_today(goal, progress, round.start_date, round.end_date, clock)

    return GoalProgressSummary(
        goal_id=goal.id,
        goal_title=goal.title,
        completed_count=completed,
        expected_count=expected,
        failed_count=failed,
        completion_percentage=completion_percentage(completed, expected),
        total_duration_seconds=sum(p.duration_seconds for p in progress),
        can_log_today=gate.can_log,
        can_log_reason=gate.reason,
        amendable_dates=amendable_dates(goal, progress, round.start_date, round.end_date, clock),
    )


def summarize_round(round: Round, progress: list[GoalProgress], clock: Clock) -> RoundProgressSummary:
    """Round counters plus one summary per goal; *progress* is the whole round's."""
    total = total_days(round.start_date, round.end_date)
    elapsed = min(elapsed_days(round.start_date, clock), total)
    return RoundProgressSummary(
        round_id=round.id,
        days_remaining=max(0, total - elapsed),
        days_elapsed=elapsed,
        total_days=total,
        goal_summaries=[
            summarize_goal(goal, [p for p in progress if p.goal_id == goal.id], round, clock)
            for goal in round.goals
        ],
    )


def goal_status(goal: Goal, progress: list[GoalProgress], round: Round, clock: Clock) -> GoalStatusResult:
    """Everything the detail view needs about one goal right now."""
    gate = can_log_today(goal, progress, round.start_date, round.end_date, clock)

    failed: list[str] = []
    completed: list[str] = []
    window_end = _status_window_end(round.end_date, clock)
    if window_end >= round.start_date:
        for s in classify(goal, progress, round.start_date, window_end, clock):
            if s.status == STATUS_FAILED:
                failed.append(s.date)
            elif s.status == STATUS_COMPLETED:
                completed.append(s.date)

    return GoalStatusResult(
        can_log_today=gate.can_log,
        reason=gate.reason,
        today_status=today_status(goal, progress, round.start_date, round.end_date, clock),
        failed_dates=failed,
        amendable_dates=amendable_dates(goal, progress, round.start_date, round.end_date, clock),
        completed_dates=completed,
        next_available_date=gate.next_available_date,
    )


def overall_completion(summary: RoundProgressSummary | None) -> int:
    """Mean goal completion percentage, rounded half up."""
    if summary is None or not summary.goal_summaries:
        return 0
    total = sum(g.completion_percentage for g in summary.goal_summaries)
    return int(total / len(summary.goal_summaries) + 0.5)
