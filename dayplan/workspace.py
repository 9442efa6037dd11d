"""Workspace root, timezone, path helpers for dayplan."""

from __future__ import annotations

import os
from datetime import date, datetime, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from dayplan.fileio import read_yaml


def workspace_root() -> Path:
    """Get the workspace root directory (holds store.json and config.yaml)."""
    return Path(
        os.environ.get("DAYPLAN_ROOT", str(Path.home() / "dayplan"))
    ).expanduser().resolve()


def local_timezone() -> tzinfo:
    """The system's local timezone."""
    return datetime.now().astimezone().tzinfo or timezone.utc


def get_user_timezone(root: Path | None = None) -> tzinfo:
    """Get user's timezone from config.yaml, defaulting to system local."""
    if root is None:
        root = workspace_root()
    try:
        config = read_yaml(config_path(root))
        name = config.get("timezone")
        if name:
            return ZoneInfo(str(name))
    except Exception:
        pass
    return local_timezone()


def local_today(root: Path | None = None) -> date:
    """Today's calendar date in the user's timezone."""
    return datetime.now(get_user_timezone(root)).date()


# ── Path helpers ──────────────────────────────────────────────

def store_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "store.json"


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "logs" / "dayplan.log"


def export_path(day: str, root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "exports" / f"{day}.md"
