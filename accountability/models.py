"""Typed dataclasses for the accountability data model.

Stored models use from_dict/to_dict for JSON/YAML serialization.
camelCase on disk and over HTTP is mapped to snake_case in Python.
Unknown keys are ignored; missing optional keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from accountability.dates import DAY_NAMES, normalize_date


# ── Frequency ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Daily:
    """Every calendar day counts."""

    type: ClassVar[str] = "daily"


@dataclass(frozen=True)
class TimesPerWeek:
    """Any day counts, ``count`` completions required per Monday-Sunday week."""

    count: int
    type: ClassVar[str] = "timesPerWeek"

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ValueError(f"timesPerWeek count must be an integer, got {self.count!r}")
        if not 1 <= self.count <= 7:
            raise ValueError(f"timesPerWeek count must be 1-7, got {self.count}")


@dataclass(frozen=True)
class SpecificDays:
    """Only the listed weekdays count. An empty set never applies."""

    days: frozenset[str] = frozenset()
    type: ClassVar[str] = "specificDays"

    def __post_init__(self) -> None:
        normalized = frozenset(str(d).strip().lower() for d in self.days)
        unknown = sorted(normalized - set(DAY_NAMES))
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        object.__setattr__(self, "days", normalized)

    def ordered_days(self) -> list[str]:
        return [d for d in DAY_NAMES if d in self.days]


Frequency = Daily | TimesPerWeek | SpecificDays

FREQUENCY_TYPES = {Daily.type, TimesPerWeek.type, SpecificDays.type}


def frequency_from_dict(d: dict[str, Any] | Frequency) -> Frequency:
    """Build a Frequency from its wire shape; reject anything unknown."""
    if isinstance(d, (Daily, TimesPerWeek, SpecificDays)):
        return d
    if not isinstance(d, dict):
        raise ValueError(f"Invalid frequency: {d!r}")
    ftype = d.get("type")
    if ftype == Daily.type:
        return Daily()
    if ftype == TimesPerWeek.type:
        if "count" not in d:
            raise ValueError("timesPerWeek frequency requires a count")
        return TimesPerWeek(count=d["count"])
    if ftype == SpecificDays.type:
        days = d.get("days") or []
        if isinstance(days, str):
            days = [days]
        return SpecificDays(days=frozenset(days))
    raise ValueError(f"Unknown frequency type: {ftype!r}")


def frequency_to_dict(frequency: Frequency) -> dict[str, Any]:
    if isinstance(frequency, Daily):
        return {"type": Daily.type}
    if isinstance(frequency, TimesPerWeek):
        return {"type": TimesPerWeek.type, "count": frequency.count}
    if isinstance(frequency, SpecificDays):
        return {"type": SpecificDays.type, "days": frequency.ordered_days()}
    raise TypeError(f"Unknown frequency: {frequency!r}")


# ── Goals & Rounds ────────────────────────────────────────────

DEFAULT_NOTIFICATION_TIME = "09:00"


@dataclass
class Goal:
    id: str = ""
    title: str = ""
    frequency: Frequency = field(default_factory=Daily)
    duration_seconds: int = 0
    description: str = ""
    emoji: str = ""
    notification_time: str = DEFAULT_NOTIFICATION_TIME

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Goal:
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "")),
            frequency=frequency_from_dict(d.get("frequency") or {"type": Daily.type}),
            duration_seconds=int(d.get("durationSeconds", d.get("duration_seconds", 0)) or 0),
            description=str(d.get("description", "") or ""),
            emoji=str(d.get("emoji", "") or ""),
            notification_time=str(d.get("notificationTime", DEFAULT_NOTIFICATION_TIME)),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "frequency": frequency_to_dict(self.frequency),
            "durationSeconds": self.duration_seconds,
            "notificationTime": self.notification_time,
        }
        if self.description:
            d["description"] = self.description
        if self.emoji:
            d["emoji"] = self.emoji
        return d


@dataclass
class Round:
    id: str = ""
    start_date: str = ""
    end_date: str = ""
    goals: list[Goal] = field(default_factory=list)
    device_id: str = ""
    reward: str = ""
    punishment: str = ""
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(f"Round end date {self.end_date} is before start date {self.start_date}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Round:
        return cls(
            id=str(d.get("id", "")),
            start_date=normalize_date(str(d.get("startDate", ""))),
            end_date=normalize_date(str(d.get("endDate", ""))),
            goals=[Goal.from_dict(g) for g in (d.get("goals") or [])],
            device_id=str(d.get("deviceId", "")),
            reward=str(d.get("reward", "") or ""),
            punishment=str(d.get("punishment", "") or ""),
            created_at=str(d.get("createdAt", "")),
            updated_at=str(d.get("updatedAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "deviceId": self.device_id,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "goals": [g.to_dict() for g in self.goals],
            "reward": self.reward,
            "punishment": self.punishment,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def find_goal(self, goal_id: str) -> Goal | None:
        for g in self.goals:
            if g.id == goal_id:
                return g
        return None


# ── Progress ──────────────────────────────────────────────────


@dataclass
class GoalProgress:
    id: str = ""
    round_id: str = ""
    goal_id: str = ""
    target_date: str = ""
    completed_at: str = ""
    duration_seconds: int = 0
    notes: str | None = None
    is_amendment: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GoalProgress:
        completed_at = str(d.get("completedAt", ""))
        # Entries written before target dates existed count toward their recording day
        target = d.get("targetDate") or completed_at
        return cls(
            id=str(d.get("id", "")),
            round_id=str(d.get("roundId", "")),
            goal_id=str(d.get("goalId", "")),
            target_date=normalize_date(str(target)),
            completed_at=completed_at,
            duration_seconds=int(d.get("durationSeconds", 0) or 0),
            notes=d.get("notes"),
            is_amendment=bool(d.get("isAmendment", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "roundId": self.round_id,
            "goalId": self.goal_id,
            "targetDate": self.target_date,
            "completedAt": self.completed_at,
            "durationSeconds": self.duration_seconds,
            "isAmendment": self.is_amendment,
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d


# ── Engine results ────────────────────────────────────────────

STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_PENDING = "pending"
STATUS_NOT_APPLICABLE = "not_applicable"
VALID_STATUSES = {STATUS_COMPLETED, STATUS_FAILED, STATUS_PENDING, STATUS_NOT_APPLICABLE}


@dataclass(frozen=True)
class DayStatus:
    date: str
    status: str
    progress_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"date": self.date, "status": self.status}
        if self.progress_id is not None:
            d["progressId"] = self.progress_id
        return d


@dataclass
class CanLogResult:
    can_log: bool
    reason: str | None = None
    code: str | None = None
    next_available_date: str | None = None
    failed_dates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"canLog": self.can_log}
        if self.reason is not None:
            d["reason"] = self.reason
        if self.code is not None:
            d["code"] = self.code
        if self.next_available_date is not None:
            d["nextAvailableDate"] = self.next_available_date
        if self.failed_dates:
            d["failedDates"] = list(self.failed_dates)
        return d


@dataclass
class GoalStatusResult:
    can_log_today: bool
    reason: str | None
    today_status: str
    failed_dates: list[str] = field(default_factory=list)
    amendable_dates: list[str] = field(default_factory=list)
    completed_dates: list[str] = field(default_factory=list)
    next_available_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "canLogToday": self.can_log_today,
            "reason": self.reason,
            "todayStatus": self.today_status,
            "failedDates": self.failed_dates,
            "amendableDates": self.amendable_dates,
            "completedDates": self.completed_dates,
            "nextAvailableDate": self.next_available_date,
        }


@dataclass
class GoalProgressSummary:
    goal_id: str = ""
    goal_title: str = ""
    completed_count: int = 0
    expected_count: int = 0
    failed_count: int = 0
    completion_percentage: float = 0.0
    total_duration_seconds: int = 0
    can_log_today: bool = False
    can_log_reason: str | None = None
    amendable_dates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "goalId": self.goal_id,
            "goalTitle": self.goal_title,
            "completedCount": self.completed_count,
            "expectedCount": self.expected_count,
            "failedCount": self.failed_count,
            "completionPercentage": round(self.completion_percentage, 2),
            "totalDurationSeconds": self.total_duration_seconds,
            "canLogToday": self.can_log_today,
            "canLogReason": self.can_log_reason,
            "amendableDates": self.amendable_dates,
        }


@dataclass
class RoundProgressSummary:
    round_id: str = ""
    days_remaining: int = 0
    days_elapsed: int = 0
    total_days: int = 0
    goal_summaries: list[GoalProgressSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roundId": self.round_id,
            "daysRemaining": self.days_remaining,
            "daysElapsed": self.days_elapsed,
            "totalDays": self.total_days,
            "goalSummaries": [g.to_dict() for g in self.goal_summaries],
        }
