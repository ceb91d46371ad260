"""Tests for accountability/status.py — per-date classification and amendable dates."""

import pytest

from accountability import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_NOT_APPLICABLE,
    STATUS_PENDING,
    Daily,
    FixedClock,
    InvalidDateRange,
    SpecificDays,
    TimesPerWeek,
    amendable_dates,
    classify,
    completed_dates,
    failed_dates,
    group_by_week,
    today_status,
)

from conftest import logged, make_goal

MON_WED = SpecificDays(frozenset({"monday", "wednesday"}))


def _statuses(result):
    return {s.date: s.status for s in result}


def test_daily_without_progress_fails_past_and_pends_today():
    clock = FixedClock("2026-02-11")
    result = classify(make_goal(Daily()), [], "2026-02-09", "2026-02-13", clock)
    assert [s.date for s in result] == [
        "2026-02-09", "2026-02-10", "2026-02-11", "2026-02-12", "2026-02-13",
    ]
    assert _statuses(result) == {
        "2026-02-09": STATUS_FAILED,
        "2026-02-10": STATUS_FAILED,
        "2026-02-11": STATUS_PENDING,
        "2026-02-12": STATUS_PENDING,
        "2026-02-13": STATUS_PENDING,
    }


def test_completed_carries_progress_id():
    clock = FixedClock("2026-02-11")
    result = classify(make_goal(Daily()), logged("2026-02-10"), "2026-02-09", "2026-02-11", clock)
    completed = [s for s in result if s.status == STATUS_COMPLETED]
    assert len(completed) == 1
    assert completed[0].date == "2026-02-10"
    assert completed[0].progress_id == "p-2026-02-10"


def test_specific_days_off_days_are_not_applicable():
    clock = FixedClock("2026-02-13")
    result = classify(make_goal(MON_WED), logged("2026-02-09"), "2026-02-09", "2026-02-15", clock)
    assert _statuses(result) == {
        "2026-02-09": STATUS_COMPLETED,
        "2026-02-10": STATUS_NOT_APPLICABLE,
        "2026-02-11": STATUS_FAILED,
        "2026-02-12": STATUS_NOT_APPLICABLE,
        "2026-02-13": STATUS_NOT_APPLICABLE,
        "2026-02-14": STATUS_NOT_APPLICABLE,
        "2026-02-15": STATUS_NOT_APPLICABLE,
    }


def test_times_per_week_fails_whole_week_after_it_ends():
    # Week of 2026-02-02 ended with 1 of 3; week of 2026-02-09 is in progress
    clock = FixedClock("2026-02-11")
    goal = make_goal(TimesPerWeek(3))
    result = classify(goal, logged("2026-02-04"), "2026-02-02", "2026-02-11", clock)
    statuses = _statuses(result)
    assert statuses["2026-02-04"] == STATUS_COMPLETED
    for d in ("2026-02-02", "2026-02-03", "2026-02-05", "2026-02-06", "2026-02-07", "2026-02-08"):
        assert statuses[d] == STATUS_FAILED
    for d in ("2026-02-09", "2026-02-10", "2026-02-11"):
        assert statuses[d] == STATUS_PENDING


def test_times_per_week_met_week_has_no_failures():
    clock = FixedClock("2026-02-11")
    goal = make_goal(TimesPerWeek(3))
    progress = logged("2026-02-02", "2026-02-04", "2026-02-06")
    assert failed_dates(goal, progress, "2026-02-02", "2026-02-08", clock) == []
    assert completed_dates(goal, progress, "2026-02-02", "2026-02-08", clock) == [
        "2026-02-02", "2026-02-04", "2026-02-06",
    ]


def test_times_per_week_counts_progress_outside_requested_range():
    # Range starts mid-week; the Monday entry still counts toward that week's quota
    clock = FixedClock("2026-02-11")
    goal = make_goal(TimesPerWeek(2))
    progress = logged("2026-02-02", "2026-02-06")
    assert failed_dates(goal, progress, "2026-02-05", "2026-02-08", clock) == []


def test_classify_reversed_range_raises():
    with pytest.raises(InvalidDateRange):
        classify(make_goal(Daily()), [], "2026-02-11", "2026-02-01", FixedClock("2026-02-11"))


def test_group_by_week():
    groups = group_by_week(["2026-02-07", "2026-02-08", "2026-02-09", "2026-02-15", "2026-02-16"])
    assert groups == [
        ("2026-02-02", ["2026-02-07", "2026-02-08"]),
        ("2026-02-09", ["2026-02-09", "2026-02-15"]),
        ("2026-02-16", ["2026-02-16"]),
    ]


def test_today_status():
    clock = FixedClock("2026-02-11")
    goal = make_goal(Daily())
    assert today_status(goal, [], "2026-02-02", "2026-02-28", clock) == STATUS_PENDING
    assert today_status(goal, logged("2026-02-11"), "2026-02-02", "2026-02-28", clock) == STATUS_COMPLETED
    assert today_status(goal, [], "2026-02-12", "2026-02-28", clock) == STATUS_NOT_APPLICABLE
    assert today_status(make_goal(SpecificDays(frozenset({"friday"}))), [], "2026-02-02", "2026-02-28", clock) == STATUS_NOT_APPLICABLE


# ── Amendable dates ───────────────────────────────────────────


def test_amendable_excludes_today_and_logged_dates():
    clock = FixedClock("2026-02-11")
    result = amendable_dates(make_goal(Daily()), logged("2026-02-09"), "2026-02-09", "2026-02-28", clock)
    assert result == ["2026-02-10"]


def test_amendable_empty_on_first_day():
    clock = FixedClock("2026-02-09")
    assert amendable_dates(make_goal(Daily()), [], "2026-02-09", "2026-02-28", clock) == []


def test_amendable_empty_before_round_starts():
    clock = FixedClock("2026-02-01")
    assert amendable_dates(make_goal(Daily()), [], "2026-02-09", "2026-02-28", clock) == []


def test_amendable_after_round_ends_stays_inside_round():
    clock = FixedClock("2026-03-05")
    result = amendable_dates(make_goal(Daily()), logged("2026-02-26"), "2026-02-25", "2026-02-28", clock)
    assert result == ["2026-02-25", "2026-02-27", "2026-02-28"]


def test_amendable_times_per_week_one_date_per_failed_week():
    clock = FixedClock("2026-02-18")
    goal = make_goal(TimesPerWeek(2))
    # Week of 02-02: one entry, failed. Week of 02-09: none, failed. Week of 02-16: in progress.
    result = amendable_dates(goal, logged("2026-02-08"), "2026-02-02", "2026-02-28", clock)
    assert result == ["2026-02-07", "2026-02-15"]


def test_amendable_times_per_week_ignores_met_weeks():
    clock = FixedClock("2026-02-18")
    goal = make_goal(TimesPerWeek(1))
    result = amendable_dates(goal, logged("2026-02-03", "2026-02-10"), "2026-02-02", "2026-02-28", clock)
    assert result == []
