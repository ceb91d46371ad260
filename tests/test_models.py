"""Tests for accountability/models.py — frequency and record serialization."""

import pytest

from accountability import (
    Daily,
    Goal,
    GoalProgress,
    Round,
    SpecificDays,
    TimesPerWeek,
    frequency_from_dict,
    frequency_to_dict,
)
from accountability.models import GoalProgressSummary


def test_frequency_from_dict_variants():
    assert frequency_from_dict({"type": "daily"}) == Daily()
    assert frequency_from_dict({"type": "timesPerWeek", "count": 3}) == TimesPerWeek(3)
    freq = frequency_from_dict({"type": "specificDays", "days": ["Monday", "friday"]})
    assert freq == SpecificDays(frozenset({"monday", "friday"}))


def test_frequency_from_dict_rejects_unknown_type():
    with pytest.raises(ValueError, match="Unknown frequency type"):
        frequency_from_dict({"type": "monthly"})


def test_times_per_week_count_bounds():
    with pytest.raises(ValueError):
        TimesPerWeek(0)
    with pytest.raises(ValueError):
        TimesPerWeek(8)
    with pytest.raises(ValueError):
        TimesPerWeek(True)
    with pytest.raises(ValueError):
        frequency_from_dict({"type": "timesPerWeek"})
    assert TimesPerWeek(7).count == 7


def test_specific_days_rejects_unknown_weekday():
    with pytest.raises(ValueError, match="Unknown weekday"):
        SpecificDays(frozenset({"funday"}))


def test_specific_days_serializes_in_week_order():
    freq = SpecificDays(frozenset({"friday", "monday", "wednesday"}))
    assert frequency_to_dict(freq) == {"type": "specificDays", "days": ["monday", "wednesday", "friday"]}


def test_goal_from_dict_defaults():
    goal = Goal.from_dict({"id": "g1", "title": "Stretch"})
    assert goal.frequency == Daily()
    assert goal.duration_seconds == 0
    assert goal.notification_time == "09:00"


def test_goal_to_dict_camel_case():
    goal = Goal(id="g1", title="Gym", frequency=TimesPerWeek(3), duration_seconds=3600, emoji="💪")
    d = goal.to_dict()
    assert d["durationSeconds"] == 3600
    assert d["frequency"] == {"type": "timesPerWeek", "count": 3}
    assert d["emoji"] == "💪"
    assert "description" not in d


def test_round_from_dict_normalizes_dates():
    r = Round.from_dict({
        "id": "r1",
        "startDate": "2026-02-02T00:00:00.000Z",
        "endDate": "2026-02-28",
        "goals": [{"id": "g1", "title": "Read", "frequency": {"type": "daily"}}],
    })
    assert r.start_date == "2026-02-02"
    assert r.find_goal("g1").title == "Read"
    assert r.find_goal("missing") is None


def test_round_rejects_end_before_start():
    with pytest.raises(ValueError):
        Round(id="r1", start_date="2026-02-10", end_date="2026-02-01")


def test_progress_target_date_falls_back_to_completed_at():
    p = GoalProgress.from_dict({
        "id": "p1",
        "roundId": "r1",
        "goalId": "g1",
        "completedAt": "2026-02-05T22:10:00+00:00",
        "durationSeconds": 600,
    })
    assert p.target_date == "2026-02-05"
    assert p.is_amendment is False


def test_progress_to_dict_omits_missing_notes():
    p = GoalProgress(id="p1", round_id="r1", goal_id="g1", target_date="2026-02-05")
    assert "notes" not in p.to_dict()
    p.notes = "felt good"
    assert p.to_dict()["notes"] == "felt good"


def test_summary_percentage_rounded_on_the_wire():
    s = GoalProgressSummary(goal_id="g1", completion_percentage=100 * 2 / 15)
    assert s.to_dict()["completionPercentage"] == 13.33
