"""Accountability rounds library — goal scheduling engine and workspace services.

Public API re-exports for convenient imports:
    from accountability import classify, can_log_today, FixedClock, ...
"""

# Clock & calendar
from accountability.clock import Clock, FixedClock, SystemClock
from accountability.dates import (
    DAY_NAMES,
    WeekBounds,
    today,
    to_date_string,
    parse_date_string,
    day_of_week,
    week_boundaries,
    date_range,
    iter_dates,
    add_days,
    days_between,
    format_date_range,
)

# Errors
from accountability.errors import (
    AccountabilityError,
    EntityNotFound,
    InvalidDateRange,
    ValidationError,
)

# Models
from accountability.models import (
    Daily,
    TimesPerWeek,
    SpecificDays,
    Frequency,
    frequency_from_dict,
    frequency_to_dict,
    Goal,
    Round,
    GoalProgress,
    DayStatus,
    CanLogResult,
    GoalStatusResult,
    GoalProgressSummary,
    RoundProgressSummary,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_NOT_APPLICABLE,
)

# Engine
from accountability.frequency import (
    is_applicable,
    next_applicable_date,
    not_applicable_reason,
    describe_frequency,
    weekly_quota,
)
from accountability.status import (
    classify,
    group_by_week,
    failed_dates,
    completed_dates,
    today_status,
    amendable_dates,
)
from accountability.gate import can_log_today, validate_log_target
from accountability.summary import (
    elapsed_days,
    expected_count,
    summarize_goal,
    summarize_round,
    goal_status,
    overall_completion,
)

# Workspace
from accountability.workspace import (
    workspace_root,
    get_user_timezone,
    get_clock,
    today_str,
    configure_logging,
)
