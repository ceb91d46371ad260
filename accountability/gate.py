"""Decides whether progress may be logged today, or for a given target date."""

from __future__ import annotations

from accountability.clock import Clock
from accountability.dates import add_days, to_date_string, week_boundaries
from accountability.frequency import (
    is_applicable,
    next_applicable_date,
    not_applicable_reason,
    weekly_quota,
)
from accountability.models import CanLogResult, Goal, GoalProgress, TimesPerWeek
from accountability.status import failed_dates

CODE_ROUND_NOT_STARTED = "round_not_started"
CODE_ROUND_ENDED = "round_ended"
CODE_NOT_APPLICABLE = "not_applicable"
CODE_ALREADY_LOGGED = "already_logged"
CODE_QUOTA_MET = "quota_met"

REASON_ROUND_NOT_STARTED = "Round has not started yet"
REASON_ROUND_ENDED = "Round has ended"
REASON_ALREADY_LOGGED = "Already logged progress for today"


def _next_week_start(date: str, round_end: str) -> str | None:
    monday = add_days(week_boundaries(date).end, 1)
    return monday if monday <= round_end else None


def can_log_today(
    goal: Goal,
    progress: list[GoalProgress],
    round_start: str,
    round_end: str,
    clock: Clock,
) -> CanLogResult:
    """Ordered decision list; the first rule that matches wins.

    1. round not started   2. round ended   3. today off-schedule
    4. already logged today   5. weekly quota met   6. allowed
    """
    today = to_date_string(clock.today())
    frequency = goal.frequency

    if today < round_start:
        return CanLogResult(
            can_log=False,
            reason=REASON_ROUND_NOT_STARTED,
            code=CODE_ROUND_NOT_STARTED,
            next_available_date=round_start,
        )

    if today > round_end:
        return CanLogResult(can_log=False, reason=REASON_ROUND_ENDED, code=CODE_ROUND_ENDED)

    if not is_applicable(today, frequency):
        return CanLogResult(
            can_log=False,
            reason=not_applicable_reason(frequency),
            code=CODE_NOT_APPLICABLE,
            next_available_date=next_applicable_date(frequency, today, round_end),
        )

    if any(p.target_date == today for p in progress):
        if isinstance(frequency, TimesPerWeek):
            quota = weekly_quota(frequency, progress, today)
            if quota.is_met:
                return CanLogResult(
                    can_log=False,
                    reason=f"Weekly quota of {quota.required} already met",
                    code=CODE_QUOTA_MET,
                    next_available_date=_next_week_start(today, round_end),
                )
            return CanLogResult(
                can_log=False,
                reason=REASON_ALREADY_LOGGED,
                code=CODE_ALREADY_LOGGED,
                next_available_date=next_applicable_date(frequency, today, round_end),
            )
        return CanLogResult(can_log=False, reason=REASON_ALREADY_LOGGED, code=CODE_ALREADY_LOGGED)

    if isinstance(frequency, TimesPerWeek):
        quota = weekly_quota(frequency, progress, today)
        if quota.is_met:
            return CanLogResult(
                can_log=False,
                reason=f"Weekly quota of {quota.required} already met for this week",
                code=CODE_QUOTA_MET,
                next_available_date=_next_week_start(today, round_end),
            )

    missed: list[str] = []
    if today > round_start:
        missed = failed_dates(goal, progress, round_start, add_days(today, -1), clock)
    return CanLogResult(can_log=True, failed_dates=missed)


def validate_log_target(
    goal: Goal,
    progress: list[GoalProgress],
    round_start: str,
    round_end: str,
    target_date: str,
    clock: Clock,
) -> list[str]:
    """Reasons *target_date* cannot receive a progress entry (empty if it can)."""
    today = to_date_string(clock.today())
    errors: list[str] = []

    if target_date < round_start:
        errors.append(f"Cannot log progress for {target_date}: before round start date")
    if target_date > round_end:
        errors.append(f"Cannot log progress for {target_date}: after round end date")
    if target_date > today:
        errors.append(f"Cannot log progress for future date {target_date}")
    if any(p.target_date == target_date for p in progress):
        errors.append(f"Progress already logged for {target_date}")
    if not is_applicable(target_date, goal.frequency):
        errors.append(f"{target_date} is not an applicable date for this goal")
    elif isinstance(goal.frequency, TimesPerWeek):
        quota = weekly_quota(goal.frequency, progress, target_date)
        if quota.is_met:
            errors.append(f"Weekly quota of {quota.required} already met")

    return errors
