"""Lifecycle hooks: shell commands run when rounds, goals or progress change.

Configured via hooks.yaml at the workspace root, e.g.::

    on_progress_logged:
      - notify-send "Logged!"
      - command: ./reschedule-reminders.sh
        timeout: 10

Hook points:
- on_round_created, on_round_deleted
- on_goal_added, on_goal_removed
- on_progress_logged, on_progress_deleted
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from accountability.fileio import read_yaml
from accountability.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_round_created",
    "on_round_deleted",
    "on_goal_added",
    "on_goal_removed",
    "on_progress_logged",
    "on_progress_deleted",
}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    if root is None:
        root = workspace_root()
    return read_yaml(hooks_config_path(root))


def _timeout(value: Any, hook_point: str) -> float:
    """Positive number of seconds, falling back to the default."""
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        seconds = 0
    if isinstance(value, bool) or seconds <= 0:
        logger.warning("Invalid %s hook timeout %r, using %ss", hook_point, value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return seconds


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*.

    Context is passed as JSON on stdin. Failures are reported in the result
    list, never raised: a broken hook must not undo a committed change.
    """
    if hook_point not in VALID_HOOK_POINTS:
        raise ValueError(f"Unknown hook point: {hook_point}")

    if root is None:
        root = workspace_root()

    try:
        config = load_hooks_config(root)
    except ValueError as e:
        logger.warning("Skipping %s hooks, unreadable config: %s", hook_point, e)
        return [{"hook_point": hook_point, "exit_code": -1, "error": str(e)}]

    hooks = config.get(hook_point, [])
    if not hooks or not isinstance(hooks, list):
        return []

    context_json = json.dumps({"hook": hook_point, **context}, ensure_ascii=False)
    results = []

    for hook in hooks:
        if isinstance(hook, str):
            command, timeout = hook, DEFAULT_TIMEOUT
        elif isinstance(hook, dict):
            command = str(hook.get("command", "") or "")
            timeout = _timeout(hook.get("timeout"), hook_point)
        else:
            logger.warning("Ignoring malformed %s hook: %r", hook_point, hook)
            continue

        if not command:
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=context_json,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:OUTPUT_CAP]
            result["stderr"] = proc.stderr[:OUTPUT_CAP]
            if proc.returncode != 0:
                logger.warning("Hook %r (%s) exited with %d", command, hook_point, proc.returncode)
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout}s"
            logger.warning("Hook %r (%s) timed out after %ss", command, hook_point, timeout)
        except OSError as e:
            result["exit_code"] = -1
            result["error"] = str(e)
            logger.warning("Hook %r (%s) failed: %s", command, hook_point, e)

        results.append(result)

    return results
