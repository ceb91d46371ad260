"""Workspace root, settings, clock and logging setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from accountability.clock import Clock, SystemClock
from accountability.dates import to_date_string
from accountability.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_ID = "local"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def workspace_root() -> Path:
    """Directory holding settings.yaml, hooks.yaml and data/."""
    return Path(
        os.environ.get("ACCOUNTABILITY_ROOT", str(Path.home() / "accountability"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def rounds_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data" / "rounds.yaml"


def progress_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data" / "progress.json"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> dict[str, Any]:
    return read_yaml(settings_path(root))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """User's timezone from settings.yaml, defaulting to UTC."""
    name = load_settings(root).get("timezone") or "UTC"
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings, using UTC", name)
        return ZoneInfo("UTC")


def get_clock(root: Path | None = None) -> Clock:
    return SystemClock(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Today's date string (YYYY-MM-DD) in the user's timezone."""
    return to_date_string(get_clock(root).today())


def device_id(root: Path | None = None) -> str:
    return str(load_settings(root).get("device_id") or DEFAULT_DEVICE_ID)


# ── Logging ───────────────────────────────────────────────────

def log_level(root: Path | None = None) -> str:
    level = os.environ.get("ACCOUNTABILITY_LOG_LEVEL") or load_settings(root).get("log_level")
    return str(level or DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: str | int | None = None, root: Path | None = None) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    if level is None:
        level = log_level(root)
    pkg_logger = logging.getLogger("accountability")
    pkg_logger.setLevel(level)
    if not any(getattr(h, "_accountability", False) for h in pkg_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._accountability = True  # type: ignore[attr-defined]
        pkg_logger.addHandler(handler)
    return pkg_logger
