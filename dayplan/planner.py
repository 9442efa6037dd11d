"""The Planner controller: one owner for all planner state.

Views (the Textual TUI, the web UI) hold a Planner and go through it; the
date cursor, timer, and per-day lists are never reached through globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable

from dayplan.config import PlannerConfig, load_config
from dayplan.datecursor import DateCursor
from dayplan.fileio import write_text_atomic
from dayplan.focus import FocusTimer
from dayplan.habits import HabitList
from dayplan.hooks import HookResult, run_hooks
from dayplan.log import setup_logging
from dayplan.models import PRIORITY_NAMES, Habit, Task
from dayplan.notes import NotesPad
from dayplan.store import LocalStore, MemoryStore
from dayplan.tasks import TaskList
from dayplan.workspace import export_path, local_today, store_path, workspace_root

log = logging.getLogger(__name__)


@dataclass
class HookEvent:
    hook_point: str
    context: dict[str, Any]


class Planner:
    def __init__(
        self,
        store: MemoryStore,
        config: PlannerConfig | None = None,
        root: Path | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.store = store
        self.config = config or PlannerConfig()
        self.root = root
        self.cursor = DateCursor(store, today=today)
        self.timer = FocusTimer(
            store,
            default_duration=self.config.pomodoro_duration,
            default_break=self.config.pomodoro_break,
        )
        self.tasks = TaskList(store, self.cursor, default_category=self.config.default_category)
        self.habits = HabitList(store, self.cursor, seed_names=self.config.seed_habits)
        self.notes = NotesPad(store, self.cursor)
        self._events: list[HookEvent] = []

    @classmethod
    def open(cls, root: Path | None = None) -> Planner:
        """Build a planner over the workspace's store.json and config.yaml."""
        if root is None:
            root = workspace_root()
        config = load_config(root)
        setup_logging(root, config.log_level)
        store = LocalStore(store_path(root), quota_bytes=config.quota_bytes)
        return cls(store, config, root=root, today=lambda: local_today(root))

    @property
    def date(self) -> str:
        return self.cursor.date

    # ── operations that raise hook events ──────────────────────

    def toggle_task(self, task_id: str) -> Task | None:
        task = self.tasks.toggle(task_id)
        if task is not None and task.done:
            self._events.append(HookEvent("on_task_complete", {"date": self.date, "task": task.to_dict()}))
        return task

    def toggle_habit(self, habit_id: str) -> Habit | None:
        habit = self.habits.toggle(habit_id)
        if habit is not None and habit.done:
            percent = self.habits.completion_percent()
            if percent == 100:
                self._events.append(HookEvent("on_habits_complete", {"date": self.date, "percent": percent}))
        return habit

    def tick(self) -> str | None:
        new_mode = self.timer.tick()
        if new_mode is not None:
            self._events.append(HookEvent("on_phase_change", {"mode": new_mode, "seconds": self.timer.seconds}))
        return new_mode

    def take_events(self) -> list[HookEvent]:
        events, self._events = self._events, []
        return events

    def run_hooks(self, events: list[HookEvent]) -> list[HookResult]:
        """Run hooks for *events*. Planners without a workspace run none."""
        if self.root is None:
            return []
        results: list[HookResult] = []
        for event in events:
            results.extend(run_hooks(event.hook_point, event.context, self.root))
        return results

    # ── read models ────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the selected day plus the timer."""
        tasks = self.tasks.sorted()
        habit_load = self.habits.load()
        timer = self.timer.state()
        return {
            "date": self.date,
            "label": self.cursor.label(),
            "is_today": self.cursor.is_today(),
            "tasks": [dict(t.to_dict(), priority_name=t.priority_name) for t in tasks],
            "tasks_done": sum(1 for t in tasks if t.done),
            "habits": [h.to_dict() for h in habit_load.habits],
            "habits_seeded": habit_load.seeded,
            "habits_percent": self.habits.completion_percent(),
            "notes": self.notes.text(),
            "timer": dict(timer.to_dict(), display=self.timer.display()),
            "categories": list(self.config.categories),
        }

    def export_day(self) -> str:
        """Render the selected day as printable Markdown."""
        tasks = self.tasks.sorted()
        habits = self.habits.items()
        done = sum(1 for t in tasks if t.done)

        lines = [f"# Daily Plan: {self.cursor.label()} ({self.date})", ""]

        lines.append(f"## Tasks ({done}/{len(tasks)} done)")
        if tasks:
            for t in tasks:
                mark = "x" if t.done else " "
                when = f" @{t.time}" if t.time else ""
                area = f" [{t.category}]" if t.category else ""
                lines.append(f"- [{mark}] ({PRIORITY_NAMES[t.priority]}) {t.text}{when}{area}")
        else:
            lines.append("- (none)")

        lines += ["", f"## Habits ({self.habits.completion_percent()}% complete)"]
        if habits:
            for h in habits:
                lines.append(f"- [{'x' if h.done else ' '}] {h.name}")
        else:
            lines.append("- (none)")

        notes = self.notes.text().strip()
        lines += ["", "## Notes", notes if notes else "(none)"]

        lines += [
            "",
            "## Focus timer",
            f"- Work: {self.timer.duration} min",
            f"- Break: {self.timer.break_minutes} min",
        ]
        return "\n".join(lines) + "\n"

    def export_day_to_file(self) -> Path:
        path = export_path(self.date, self.root)
        write_text_atomic(path, self.export_day())
        log.info("Exported %s to %s", self.date, path)
        return path
