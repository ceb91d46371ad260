"""Round, goal and progress operations over the workspace store.

These are the entry points used by the HTTP API and the terminal UI. They
load data, call the pure engine, persist the result and fire hooks.
Missing entities raise EntityNotFound; rejected input raises ValidationError.
"""

from __future__ import annotations

import logging
import uuid
from datetime import time
from pathlib import Path
from typing import Any

from accountability.clock import Clock
from accountability.dates import normalize_date, to_date_string
from accountability.errors import EntityNotFound, ValidationError
from accountability.gate import validate_log_target
from accountability.hooks import run_hooks
from accountability.models import (
    DEFAULT_NOTIFICATION_TIME,
    DayStatus,
    Goal,
    GoalProgress,
    GoalStatusResult,
    Round,
    RoundProgressSummary,
    frequency_from_dict,
)
from accountability.status import classify
from accountability.store import ProgressStore, RoundStore
from accountability.summary import goal_status, summarize_round
from accountability.workspace import device_id, get_clock

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _timestamp(clock: Clock) -> str:
    return clock.now().isoformat(timespec="seconds")


# ── Validation ────────────────────────────────────────────────


def validate_goal_input(goal: dict[str, Any], partial: bool = False) -> list[str]:
    """Validate goal fields and return list of errors (empty if valid)."""
    errors = []
    if not partial or "title" in goal:
        if not str(goal.get("title", "") or "").strip():
            errors.append("Missing required field: title")

    if not partial or "frequency" in goal:
        if "frequency" not in goal:
            errors.append("Missing required field: frequency")
        else:
            try:
                frequency_from_dict(goal["frequency"])
            except ValueError as e:
                errors.append(f"Invalid frequency: {e}")

    if "durationSeconds" in goal:
        value = goal["durationSeconds"]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            errors.append("durationSeconds must be a non-negative integer")

    if "notificationTime" in goal:
        try:
            time.fromisoformat(str(goal["notificationTime"]))
        except ValueError:
            errors.append("notificationTime must be HH:MM")

    return errors


def validate_round_input(round_data: dict[str, Any], partial: bool = False) -> list[str]:
    """Validate round fields (and any goals given) and return list of errors."""
    errors = []
    dates: dict[str, str] = {}
    for key in ("startDate", "endDate"):
        if key not in round_data:
            if not partial:
                errors.append(f"Missing required field: {key}")
            continue
        try:
            dates[key] = normalize_date(str(round_data[key]))
        except ValueError:
            errors.append(f"{key} must be a YYYY-MM-DD date")

    if len(dates) == 2 and dates["endDate"] < dates["startDate"]:
        errors.append("endDate must not be before startDate")

    goals = round_data.get("goals")
    if goals is not None:
        if not isinstance(goals, list):
            errors.append("goals must be a list")
        else:
            for i, g in enumerate(goals):
                if not isinstance(g, dict):
                    errors.append(f"goals[{i}] must be an object")
                    continue
                errors.extend(f"goals[{i}]: {e}" for e in validate_goal_input(g))
    return errors


def _build_goal(data: dict[str, Any], goal_id: str | None = None) -> Goal:
    goal = Goal.from_dict({"notificationTime": DEFAULT_NOTIFICATION_TIME, **data})
    goal.id = goal_id or str(data.get("id") or "") or _new_id()
    return goal


# ── Rounds ────────────────────────────────────────────────────


def create_round(data: dict[str, Any], root: Path | None = None, clock: Clock | None = None) -> Round:
    errors = validate_round_input(data)
    if errors:
        raise ValidationError(errors)
    if clock is None:
        clock = get_clock(root)

    now = _timestamp(clock)
    new_round = Round(
        id=_new_id(),
        start_date=normalize_date(str(data["startDate"])),
        end_date=normalize_date(str(data["endDate"])),
        goals=[_build_goal(g, goal_id=_new_id()) for g in (data.get("goals") or [])],
        device_id=str(data.get("deviceId") or device_id(root)),
        reward=str(data.get("reward", "") or ""),
        punishment=str(data.get("punishment", "") or ""),
        created_at=now,
        updated_at=now,
    )
    RoundStore(root).save(new_round)
    logger.info(
        "Created round %s (%s..%s) with %d goal(s)",
        new_round.id, new_round.start_date, new_round.end_date, len(new_round.goals),
    )
    run_hooks("on_round_created", {"round": new_round.to_dict()}, root)
    return new_round


def get_round(round_id: str, root: Path | None = None) -> Round:
    found = RoundStore(root).get(round_id)
    if found is None:
        raise EntityNotFound("round", round_id)
    return found


def get_all_rounds(device: str | None = None, root: Path | None = None) -> list[Round]:
    return RoundStore(root).list_by_device(device or device_id(root))


def get_active_rounds(
    device: str | None = None, root: Path | None = None, clock: Clock | None = None
) -> list[Round]:
    """Rounds that have not ended yet (end date >= today)."""
    if clock is None:
        clock = get_clock(root)
    today = to_date_string(clock.today())
    return [r for r in get_all_rounds(device, root) if r.end_date >= today]


def get_active_round(
    device: str | None = None, root: Path | None = None, clock: Clock | None = None
) -> Round | None:
    """The most recently started round that has not ended."""
    active = get_active_rounds(device, root, clock)
    if not active:
        return None
    return max(active, key=lambda r: r.start_date)


def update_round(
    round_id: str, updates: dict[str, Any], root: Path | None = None, clock: Clock | None = None
) -> Round:
    existing = get_round(round_id, root)
    errors = validate_round_input(updates, partial=True)
    if errors:
        raise ValidationError(errors)
    if clock is None:
        clock = get_clock(root)

    merged = existing.to_dict()
    for key, value in updates.items():
        if key in ("id", "deviceId", "createdAt", "updatedAt"):
            continue
        merged[key] = value
    if "goals" in updates:
        merged["goals"] = [
            _build_goal(g).to_dict() for g in (updates.get("goals") or [])
        ]

    try:
        updated = Round.from_dict(merged)
    except ValueError as e:
        raise ValidationError([str(e)]) from e

    progress_store = ProgressStore(root)
    kept_ids = {g.id for g in updated.goals}
    dropped_ids = [g.id for g in existing.goals if g.id not in kept_ids]
    outside = sorted({
        p.target_date
        for p in progress_store.for_round(round_id)
        if p.goal_id in kept_ids and not updated.start_date <= p.target_date <= updated.end_date
    })
    if outside:
        raise ValidationError(
            [f"Progress exists outside {updated.start_date}..{updated.end_date}: {', '.join(outside)}"]
        )

    updated.updated_at = _timestamp(clock)
    RoundStore(root).save(updated)
    removed = sum(progress_store.delete_where(round_id, gid) for gid in dropped_ids)
    logger.info(
        "Updated round %s (%s), dropped %d goal(s) and %d progress entries",
        round_id, ", ".join(sorted(updates)) or "no fields", len(dropped_ids), removed,
    )
    return updated


def delete_round(round_id: str, root: Path | None = None) -> None:
    """Delete a round and, first, every progress entry that belongs to it."""
    existing = get_round(round_id, root)
    removed = ProgressStore(root).delete_where(round_id)
    RoundStore(root).delete(round_id)
    logger.info("Deleted round %s and %d progress entries", round_id, removed)
    run_hooks("on_round_deleted", {"round": existing.to_dict(), "progressRemoved": removed}, root)


# ── Goals ─────────────────────────────────────────────────────


def _require_goal(round: Round, goal_id: str) -> Goal:
    goal = round.find_goal(goal_id)
    if goal is None:
        raise EntityNotFound("goal", goal_id, round.id)
    return goal


def add_goal(
    round_id: str, data: dict[str, Any], root: Path | None = None, clock: Clock | None = None
) -> Round:
    existing = get_round(round_id, root)
    errors = validate_goal_input(data)
    if errors:
        raise ValidationError(errors)
    if clock is None:
        clock = get_clock(root)

    goal = _build_goal(data, goal_id=_new_id())
    existing.goals.append(goal)
    existing.updated_at = _timestamp(clock)
    RoundStore(root).save(existing)
    logger.info("Added goal %s (%r) to round %s", goal.id, goal.title, round_id)
    run_hooks("on_goal_added", {"roundId": round_id, "goal": goal.to_dict()}, root)
    return existing


def update_goal(
    round_id: str,
    goal_id: str,
    updates: dict[str, Any],
    root: Path | None = None,
    clock: Clock | None = None,
) -> Round:
    """Apply field updates to one goal. Existing progress keeps its target dates."""
    existing = get_round(round_id, root)
    goal = _require_goal(existing, goal_id)
    errors = validate_goal_input(updates, partial=True)
    if errors:
        raise ValidationError(errors)
    if clock is None:
        clock = get_clock(root)

    merged = goal.to_dict()
    merged.update({k: v for k, v in updates.items() if k != "id"})
    updated_goal = _build_goal(merged, goal_id=goal_id)
    existing.goals = [updated_goal if g.id == goal_id else g for g in existing.goals]
    existing.updated_at = _timestamp(clock)
    RoundStore(root).save(existing)
    logger.info("Updated goal %s in round %s", goal_id, round_id)
    return existing


def remove_goal(
    round_id: str, goal_id: str, root: Path | None = None, clock: Clock | None = None
) -> Round:
    """Remove a goal from its round together with the goal's progress entries."""
    existing = get_round(round_id, root)
    goal = _require_goal(existing, goal_id)
    if clock is None:
        clock = get_clock(root)

    existing.goals = [g for g in existing.goals if g.id != goal_id]
    existing.updated_at = _timestamp(clock)
    RoundStore(root).save(existing)
    removed = ProgressStore(root).delete_where(round_id, goal_id)
    logger.info("Removed goal %s from round %s (%d progress entries)", goal_id, round_id, removed)
    run_hooks("on_goal_removed", {"roundId": round_id, "goal": goal.to_dict()}, root)
    return existing


# ── Progress ──────────────────────────────────────────────────


def log_progress(
    round_id: str,
    goal_id: str,
    duration_seconds: int,
    notes: str | None = None,
    target_date: str | None = None,
    root: Path | None = None,
    clock: Clock | None = None,
) -> GoalProgress:
    """Record a completion for today, or for an earlier date as an amendment."""
    existing_round = get_round(round_id, root)
    goal = _require_goal(existing_round, goal_id)
    if clock is None:
        clock = get_clock(root)

    if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int) or duration_seconds < 0:
        raise ValidationError(["durationSeconds must be a non-negative integer"])

    today = to_date_string(clock.today())
    try:
        target = normalize_date(target_date) if target_date else today
    except ValueError as e:
        raise ValidationError([str(e)]) from e

    store = ProgressStore(root)
    existing = store.for_goal(round_id, goal_id)
    errors = validate_log_target(
        goal, existing, existing_round.start_date, existing_round.end_date, target, clock
    )
    if errors:
        logger.warning("Refused progress for goal %s on %s: %s", goal_id, target, "; ".join(errors))
        raise ValidationError(errors)

    entry = GoalProgress(
        id=_new_id(),
        round_id=round_id,
        goal_id=goal_id,
        target_date=target,
        completed_at=_timestamp(clock),
        duration_seconds=duration_seconds,
        notes=notes,
        is_amendment=target != today,
    )
    store.add(entry)
    logger.info(
        "Logged progress %s for goal %s on %s%s",
        entry.id, goal_id, target, " (amendment)" if entry.is_amendment else "",
    )
    run_hooks("on_progress_logged", {"progress": entry.to_dict(), "goalTitle": goal.title}, root)
    return entry


def delete_progress(progress_id: str, root: Path | None = None) -> None:
    store = ProgressStore(root)
    entry = store.get(progress_id)
    if entry is None or not store.delete(progress_id):
        raise EntityNotFound("progress", progress_id)
    logger.info("Deleted progress %s (goal %s, %s)", progress_id, entry.goal_id, entry.target_date)
    run_hooks("on_progress_deleted", {"progress": entry.to_dict()}, root)


def get_progress_for_round(round_id: str, root: Path | None = None) -> list[GoalProgress]:
    return ProgressStore(root).for_round(round_id)


# ── Read models ───────────────────────────────────────────────


def get_goal_status(
    round_id: str, goal_id: str, root: Path | None = None, clock: Clock | None = None
) -> GoalStatusResult:
    existing_round = get_round(round_id, root)
    goal = _require_goal(existing_round, goal_id)
    if clock is None:
        clock = get_clock(root)
    progress = ProgressStore(root).for_goal(round_id, goal_id)
    return goal_status(goal, progress, existing_round, clock)


def get_progress_summary(
    round_id: str, root: Path | None = None, clock: Clock | None = None
) -> RoundProgressSummary:
    existing_round = get_round(round_id, root)
    if clock is None:
        clock = get_clock(root)
    return summarize_round(existing_round, ProgressStore(root).for_round(round_id), clock)


def get_day_statuses(
    round_id: str,
    goal_id: str,
    start: str | None = None,
    end: str | None = None,
    root: Path | None = None,
    clock: Clock | None = None,
) -> list[DayStatus]:
    """Per-date statuses for a goal, over the whole round unless narrowed."""
    existing_round = get_round(round_id, root)
    goal = _require_goal(existing_round, goal_id)
    if clock is None:
        clock = get_clock(root)
    start = normalize_date(start) if start else existing_round.start_date
    end = normalize_date(end) if end else existing_round.end_date
    progress = ProgressStore(root).for_goal(round_id, goal_id)
    return classify(goal, progress, start, end, clock)


def clear_all_data(root: Path | None = None) -> dict[str, int]:
    removed = {
        "progress": ProgressStore(root).clear(),
        "rounds": RoundStore(root).clear(),
    }
    logger.warning("Cleared all data: %d rounds, %d progress entries", removed["rounds"], removed["progress"])
    return removed
