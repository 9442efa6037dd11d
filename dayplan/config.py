"""User configuration (config.yaml) for dayplan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dayplan.fileio import read_yaml, write_yaml_atomic
from dayplan.workspace import config_path

log = logging.getLogger(__name__)

DEFAULT_SEED_HABITS = ["Hydrate (8 glasses)", "10k steps / cardio", "Study DSA 30m"]
DEFAULT_CATEGORIES = ["General", "Study", "Work", "Health", "Personal"]
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


def _positive_int(value: Any, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default


@dataclass
class PlannerConfig:
    timezone: str | None = None
    pomodoro_duration: int = 25
    pomodoro_break: int = 5
    seed_habits: list[str] = field(default_factory=lambda: list(DEFAULT_SEED_HABITS))
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    default_category: str = "General"
    quota_bytes: int | None = DEFAULT_QUOTA_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlannerConfig:
        if not d or not isinstance(d, dict):
            return cls()
        pomodoro = d.get("pomodoro") or {}
        habits = d.get("habits") or {}
        tasks = d.get("tasks") or {}
        store = d.get("store") or {}
        logging_cfg = d.get("logging") or {}

        seeds = [str(s).strip() for s in (habits.get("seed") or []) if str(s).strip()]
        categories = [str(c).strip() for c in (tasks.get("categories") or []) if str(c).strip()]
        if not categories:
            categories = list(DEFAULT_CATEGORIES)
        default_category = str(tasks.get("default_category", categories[0]))
        if default_category not in categories:
            categories.insert(0, default_category)

        quota = store.get("quota_bytes", DEFAULT_QUOTA_BYTES)
        return cls(
            timezone=d.get("timezone") or None,
            pomodoro_duration=_positive_int(pomodoro.get("duration"), 25),
            pomodoro_break=_positive_int(pomodoro.get("break"), 5),
            seed_habits=seeds or list(DEFAULT_SEED_HABITS),
            categories=categories,
            default_category=default_category,
            quota_bytes=_positive_int(quota, DEFAULT_QUOTA_BYTES) if quota is not None else None,
            log_level=str(logging_cfg.get("level", "INFO")).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.timezone:
            d["timezone"] = self.timezone
        d["pomodoro"] = {"duration": self.pomodoro_duration, "break": self.pomodoro_break}
        d["habits"] = {"seed": list(self.seed_habits)}
        d["tasks"] = {
            "categories": list(self.categories),
            "default_category": self.default_category,
        }
        d["store"] = {"quota_bytes": self.quota_bytes}
        d["logging"] = {"level": self.log_level}
        return d


def load_config(root: Path | None = None) -> PlannerConfig:
    """Load config.yaml. A missing or unparsable file yields defaults."""
    path = config_path(root)
    try:
        data = read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        return PlannerConfig()
    return PlannerConfig.from_dict(data)


def save_config(config: PlannerConfig, root: Path | None = None) -> None:
    write_yaml_atomic(config_path(root), config.to_dict())
