"""Typed dataclasses for the dayplan data model.

Records use from_dict/to_dict for JSON serialization. Stored keys keep the
planner's on-disk names ("when" for time of day, "area" for category);
unknown keys are ignored and missing keys use defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


# ── Priority ──────────────────────────────────────────────────

PRIORITIES = ("H", "M", "L")
PRIORITY_RANK = {"H": 0, "M": 1, "L": 2}
PRIORITY_NAMES = {"H": "High", "M": "Medium", "L": "Low"}

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def normalize_priority(value: Any) -> str:
    """Map 'High'/'h'/'H' etc. to a one-letter priority; unknown -> 'M'."""
    s = str(value or "").strip().upper()
    if s[:1] in PRIORITY_RANK:
        return s[:1]
    return "M"


def normalize_time(value: Any) -> str:
    """Return an 'HH:MM' string, or '' when absent or malformed.

    Accepts 'H:MM' and pads the hour.
    """
    s = str(value or "").strip()
    if not s:
        return ""
    if re.match(r"^\d:[0-5]\d$", s):
        s = "0" + s
    return s if _TIME_RE.match(s) else ""


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    text: str = ""
    priority: str = "M"  # H, M, L
    time: str = ""  # HH:MM, empty when unscheduled
    category: str = "General"
    done: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "")),
            priority=normalize_priority(d.get("priority", "M")),
            time=normalize_time(d.get("when", "")),
            category=str(d.get("area", "") or ""),
            done=bool(d.get("done", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "priority": self.priority,
            "when": self.time,
            "area": self.category,
            "done": self.done,
        }

    @property
    def priority_name(self) -> str:
        return PRIORITY_NAMES[self.priority]


# ── Habits ────────────────────────────────────────────────────


@dataclass
class Habit:
    id: str = ""
    name: str = ""
    done: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            done=bool(d.get("done", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "done": self.done}


@dataclass
class HabitLoad:
    """Result of reading a date's habit list.

    found: the date had a stored list (possibly empty).
    seeded: nothing was stored, so the default seed habits were returned.
    """

    habits: list[Habit]
    found: bool
    seeded: bool


# ── Focus timer ───────────────────────────────────────────────

WORK = "work"
BREAK = "break"
MODES = (WORK, BREAK)


@dataclass
class TimerState:
    duration: int = 25  # work minutes
    break_minutes: int = 5
    seconds: int = 25 * 60  # remaining in current phase
    running: bool = False
    mode: str = WORK

    def length_seconds(self, mode: str | None = None) -> int:
        """Configured length of *mode* (default: current mode) in seconds."""
        mode = mode or self.mode
        return (self.break_minutes if mode == BREAK else self.duration) * 60

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration": self.duration,
            "break": self.break_minutes,
            "seconds": self.seconds,
            "running": self.running,
            "mode": self.mode,
        }
