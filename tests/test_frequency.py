"""Tests for accountability/frequency.py — applicability and weekly quotas."""

from accountability import (
    Daily,
    SpecificDays,
    TimesPerWeek,
    describe_frequency,
    is_applicable,
    next_applicable_date,
    not_applicable_reason,
    weekly_quota,
)

from conftest import logged

MON_WED = SpecificDays(frozenset({"monday", "wednesday"}))


def test_daily_and_weekly_apply_every_day():
    for d in ("2026-02-09", "2026-02-14", "2026-02-15"):
        assert is_applicable(d, Daily())
        assert is_applicable(d, TimesPerWeek(2))


def test_specific_days_applicability():
    assert is_applicable("2026-02-09", MON_WED)  # Monday
    assert is_applicable("2026-02-11", MON_WED)  # Wednesday
    assert not is_applicable("2026-02-10", MON_WED)


def test_empty_specific_days_never_applies():
    empty = SpecificDays(frozenset())
    assert not is_applicable("2026-02-09", empty)
    assert next_applicable_date(empty, "2026-02-09", "2026-03-31") is None


def test_next_applicable_date_is_strictly_after():
    assert next_applicable_date(MON_WED, "2026-02-09", "2026-02-28") == "2026-02-11"
    assert next_applicable_date(MON_WED, "2026-02-11", "2026-02-28") == "2026-02-16"
    assert next_applicable_date(Daily(), "2026-02-11", "2026-02-28") == "2026-02-12"


def test_next_applicable_date_respects_until():
    assert next_applicable_date(MON_WED, "2026-02-12", "2026-02-15") is None
    assert next_applicable_date(Daily(), "2026-02-28", "2026-02-28") is None


def test_not_applicable_reason_lists_days_in_order():
    freq = SpecificDays(frozenset({"wednesday", "monday"}))
    assert not_applicable_reason(freq) == "This goal is only for: Monday, Wednesday"
    assert not_applicable_reason(SpecificDays(frozenset())) == "This goal has no scheduled days"


def test_describe_frequency():
    assert describe_frequency(Daily()) == "Every day"
    assert describe_frequency(TimesPerWeek(3)) == "3x per week"
    assert describe_frequency(MON_WED) == "Mon, Wed"


def test_weekly_quota_counts_the_whole_week():
    progress = logged("2026-02-08", "2026-02-09", "2026-02-13", "2026-02-15", "2026-02-16")
    quota = weekly_quota(TimesPerWeek(3), progress, "2026-02-11")
    assert quota.week_start == "2026-02-09"
    assert quota.week_end == "2026-02-15"
    assert quota.count == 3
    assert quota.is_met


def test_weekly_quota_not_met():
    quota = weekly_quota(TimesPerWeek(3), logged("2026-02-10"), "2026-02-11")
    assert quota.count == 1
    assert not quota.is_met
