"""Shared test fixtures for accountability tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from accountability import Daily, FixedClock, Goal, GoalProgress, Round

ROUND_ID = "round-feb"


@pytest.fixture
def clock() -> FixedClock:
    """Wednesday, 2026-02-11."""
    return FixedClock("2026-02-11")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with one February round and some progress."""
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)

    settings = {"timezone": "UTC", "device_id": "test-device", "log_level": "DEBUG"}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    rounds = {
        "rounds": [
            {
                "id": ROUND_ID,
                "deviceId": "test-device",
                "startDate": "2026-02-02",
                "endDate": "2026-02-28",
                "reward": "New running shoes",
                "punishment": "No dessert for a week",
                "createdAt": "2026-02-01T20:00:00+00:00",
                "updatedAt": "2026-02-01T20:00:00+00:00",
                "goals": [
                    {
                        "id": "read",
                        "title": "Read",
                        "frequency": {"type": "daily"},
                        "durationSeconds": 1800,
                        "emoji": "📚",
                    },
                    {
                        "id": "gym",
                        "title": "Gym",
                        "frequency": {"type": "timesPerWeek", "count": 3},
                        "durationSeconds": 3600,
                    },
                    {
                        "id": "piano",
                        "title": "Piano",
                        "frequency": {"type": "specificDays", "days": ["monday", "wednesday"]},
                        "durationSeconds": 1200,
                    },
                ],
            }
        ]
    }
    (root / "data" / "rounds.yaml").write_text(
        yaml.dump(rounds, default_flow_style=False, allow_unicode=True), encoding="utf-8"
    )

    progress = {
        "progress": [
            {
                "id": "p-read-1",
                "roundId": ROUND_ID,
                "goalId": "read",
                "targetDate": "2026-02-02",
                "completedAt": "2026-02-02T21:00:00+00:00",
                "durationSeconds": 1800,
            },
            {
                "id": "p-read-2",
                "roundId": ROUND_ID,
                "goalId": "read",
                "targetDate": "2026-02-03",
                "completedAt": "2026-02-03T21:00:00+00:00",
                "durationSeconds": 1800,
            },
            {
                "id": "p-gym-1",
                "roundId": ROUND_ID,
                "goalId": "gym",
                "targetDate": "2026-02-04",
                "completedAt": "2026-02-04T18:00:00+00:00",
                "durationSeconds": 3600,
            },
        ]
    }
    (root / "data" / "progress.json").write_text(
        json.dumps(progress, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["ACCOUNTABILITY_ROOT"] = str(root)
    yield root
    # Cleanup
    if "ACCOUNTABILITY_ROOT" in os.environ:
        del os.environ["ACCOUNTABILITY_ROOT"]


# ── Builders ──────────────────────────────────────────────────


def make_goal(frequency=None, goal_id: str = "g1", title: str = "Goal") -> Goal:
    return Goal(id=goal_id, title=title, frequency=frequency or Daily())


def make_round(start: str, end: str, goals: list[Goal] | None = None, round_id: str = "r1") -> Round:
    return Round(id=round_id, start_date=start, end_date=end, goals=goals or [])


def logged(*dates: str, goal_id: str = "g1", round_id: str = "r1") -> list[GoalProgress]:
    """One progress entry per target date."""
    return [
        GoalProgress(
            id=f"p-{d}",
            round_id=round_id,
            goal_id=goal_id,
            target_date=d,
            completed_at=f"{d}T20:00:00+00:00",
            duration_seconds=600,
        )
        for d in dates
    ]

