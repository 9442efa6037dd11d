"""Per-day task list for dayplan."""

from __future__ import annotations

import uuid

from dayplan.datecursor import DateCursor
from dayplan.models import PRIORITY_RANK, Task, normalize_priority, normalize_time
from dayplan.store import MemoryStore


def tasks_key(day: str) -> str:
    return f"tasks_{day}"


def sort_tasks(tasks: list[Task]) -> list[Task]:
    """Display order: priority (H, M, L), then time of day, unscheduled last.

    Stable, so tasks that tie keep their storage order (newest first).
    """
    return sorted(
        tasks,
        key=lambda t: (PRIORITY_RANK.get(t.priority, 1), t.time == "", t.time),
    )


class TaskList:
    def __init__(self, store: MemoryStore, cursor: DateCursor, default_category: str = "General") -> None:
        self.store = store
        self.cursor = cursor
        self.default_category = default_category

    # ── load / save ────────────────────────────────────────────

    def items(self, day: str | None = None) -> list[Task]:
        """Tasks in storage order (newest first)."""
        raw = self.store.read(tasks_key(day or self.cursor.date), [])
        if not isinstance(raw, list):
            return []
        return [Task.from_dict(t) for t in raw if isinstance(t, dict)]

    def _save(self, tasks: list[Task], day: str) -> None:
        self.store.write(tasks_key(day), [t.to_dict() for t in tasks])

    def sorted(self, day: str | None = None) -> list[Task]:
        return sort_tasks(self.items(day))

    def find(self, task_id: str) -> Task | None:
        for t in self.items():
            if t.id == task_id:
                return t
        return None

    def counts(self) -> tuple[int, int]:
        """(done, total) for the selected day."""
        tasks = self.items()
        return sum(1 for t in tasks if t.done), len(tasks)

    # ── operations ─────────────────────────────────────────────

    def add(self, text: str, priority: str = "M", time: str = "", category: str | None = None) -> Task | None:
        """Prepend a new task. Blank text is ignored (returns None)."""
        text = (text or "").strip()
        if not text:
            return None
        day = self.cursor.date
        task = Task(
            id=str(uuid.uuid4()),
            text=text,
            priority=normalize_priority(priority),
            time=normalize_time(time),
            category=(category or "").strip() or self.default_category,
            done=False,
        )
        self._save([task] + self.items(day), day)
        return task

    def toggle(self, task_id: str) -> Task | None:
        day = self.cursor.date
        tasks = self.items(day)
        for t in tasks:
            if t.id == task_id:
                t.done = not t.done
                self._save(tasks, day)
                return t
        return None

    def edit(
        self,
        task_id: str,
        text: str | None = None,
        priority: str | None = None,
        time: str | None = None,
        category: str | None = None,
    ) -> Task | None:
        """Update the given fields of a task. A blank text leaves it unchanged."""
        day = self.cursor.date
        tasks = self.items(day)
        for t in tasks:
            if t.id != task_id:
                continue
            if text is not None and text.strip():
                t.text = text.strip()
            if priority is not None:
                t.priority = normalize_priority(priority)
            if time is not None:
                t.time = normalize_time(time)
            if category is not None:
                t.category = category.strip() or self.default_category
            self._save(tasks, day)
            return t
        return None

    def remove(self, task_id: str) -> bool:
        day = self.cursor.date
        tasks = self.items(day)
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._save(remaining, day)
        return True

    def clear_completed(self) -> int:
        """Drop every done task. Returns how many were removed."""
        day = self.cursor.date
        tasks = self.items(day)
        remaining = [t for t in tasks if not t.done]
        removed = len(tasks) - len(remaining)
        if removed:
            self._save(remaining, day)
        return removed
