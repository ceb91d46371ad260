"""File-backed storage for rounds (YAML) and progress entries (JSON).

Rounds own their goals and live in data/rounds.yaml so they stay
hand-editable. Progress entries reference rounds and goals by id and live in
data/progress.json, indexed by round on load.
"""

from __future__ import annotations

import logging
from pathlib import Path

from accountability.fileio import read_json, read_yaml, write_json_atomic, write_yaml_atomic
from accountability.models import GoalProgress, Round
from accountability.workspace import progress_path, rounds_path

logger = logging.getLogger(__name__)


class RoundStore:
    def __init__(self, root: Path | None = None) -> None:
        self.path = rounds_path(root)

    def load_all(self) -> list[Round]:
        data = read_yaml(self.path)
        return [Round.from_dict(r) for r in (data.get("rounds") or [])]

    def _write(self, rounds: list[Round]) -> None:
        write_yaml_atomic(self.path, {"rounds": [r.to_dict() for r in rounds]})

    def get(self, round_id: str) -> Round | None:
        for r in self.load_all():
            if r.id == round_id:
                return r
        return None

    def list_by_device(self, device_id: str) -> list[Round]:
        return [r for r in self.load_all() if r.device_id == device_id]

    def save(self, round: Round) -> None:
        """Insert or replace by id."""
        rounds = self.load_all()
        for i, r in enumerate(rounds):
            if r.id == round.id:
                rounds[i] = round
                break
        else:
            rounds.append(round)
        self._write(rounds)

    def delete(self, round_id: str) -> bool:
        rounds = self.load_all()
        remaining = [r for r in rounds if r.id != round_id]
        if len(remaining) == len(rounds):
            return False
        self._write(remaining)
        return True

    def clear(self) -> int:
        count = len(self.load_all())
        self._write([])
        return count


class ProgressStore:
    def __init__(self, root: Path | None = None) -> None:
        self.path = progress_path(root)

    def load_all(self) -> list[GoalProgress]:
        data = read_json(self.path)
        return [GoalProgress.from_dict(p) for p in (data.get("progress") or [])]

    def _write(self, entries: list[GoalProgress]) -> None:
        write_json_atomic(self.path, {"progress": [p.to_dict() for p in entries]})

    def index_by_round(self) -> dict[str, list[GoalProgress]]:
        index: dict[str, list[GoalProgress]] = {}
        for p in self.load_all():
            index.setdefault(p.round_id, []).append(p)
        return index

    def get(self, progress_id: str) -> GoalProgress | None:
        for p in self.load_all():
            if p.id == progress_id:
                return p
        return None

    def for_round(self, round_id: str) -> list[GoalProgress]:
        return self.index_by_round().get(round_id, [])

    def for_goal(self, round_id: str, goal_id: str) -> list[GoalProgress]:
        return [p for p in self.for_round(round_id) if p.goal_id == goal_id]

    def add(self, entry: GoalProgress) -> None:
        entries = self.load_all()
        entries.append(entry)
        self._write(entries)

    def delete(self, progress_id: str) -> bool:
        entries = self.load_all()
        remaining = [p for p in entries if p.id != progress_id]
        if len(remaining) == len(entries):
            return False
        self._write(remaining)
        return True

    def delete_where(self, round_id: str, goal_id: str | None = None) -> int:
        """Drop a round's entries (or one goal's within it). Returns the count removed."""
        entries = self.load_all()
        remaining = [
            p for p in entries
            if not (p.round_id == round_id and (goal_id is None or p.goal_id == goal_id))
        ]
        removed = len(entries) - len(remaining)
        if removed:
            self._write(remaining)
            logger.debug("Removed %d progress entries for round %s", removed, round_id)
        return removed

    def clear(self) -> int:
        count = len(self.load_all())
        self._write([])
        return count
