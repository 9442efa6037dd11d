"""Per-day habit checklist for dayplan.

A day with no stored list shows the configured seed habits. Reading never
writes: the seeds are only persisted by initialize() or by the first change
made on that day. Seed ids are deterministic so repeated reads agree.
"""

from __future__ import annotations

import uuid

from dayplan.config import DEFAULT_SEED_HABITS
from dayplan.datecursor import DateCursor
from dayplan.models import Habit, HabitLoad
from dayplan.store import MemoryStore


def habits_key(day: str) -> str:
    return f"habits_{day}"


def completion_percent(habits: list[Habit]) -> int:
    """Percentage of habits done, rounded half up; 0 for an empty list."""
    total = len(habits)
    if total == 0:
        return 0
    done = sum(1 for h in habits if h.done)
    return (200 * done + total) // (2 * total)


class HabitList:
    def __init__(self, store: MemoryStore, cursor: DateCursor, seed_names: list[str] | None = None) -> None:
        self.store = store
        self.cursor = cursor
        self.seed_names = list(seed_names) if seed_names else list(DEFAULT_SEED_HABITS)

    def seed(self) -> list[Habit]:
        return [Habit(id=f"seed-{i}", name=name) for i, name in enumerate(self.seed_names, start=1)]

    def load(self, day: str | None = None) -> HabitLoad:
        key = habits_key(day or self.cursor.date)
        if key not in self.store:
            return HabitLoad(habits=self.seed(), found=False, seeded=True)
        raw = self.store.read(key, None)
        if not isinstance(raw, list):
            # stored but unreadable: fall back to the seed list
            return HabitLoad(habits=self.seed(), found=False, seeded=True)
        habits = [Habit.from_dict(h) for h in raw if isinstance(h, dict)]
        return HabitLoad(habits=habits, found=True, seeded=False)

    def items(self, day: str | None = None) -> list[Habit]:
        return self.load(day).habits

    def initialize(self, day: str | None = None) -> HabitLoad:
        """Persist the seed list for a day that has none stored."""
        day = day or self.cursor.date
        result = self.load(day)
        if result.seeded:
            self._save(result.habits, day)
        return result

    def _save(self, habits: list[Habit], day: str) -> None:
        self.store.write(habits_key(day), [h.to_dict() for h in habits])

    def completion_percent(self) -> int:
        return completion_percent(self.items())

    # ── operations ─────────────────────────────────────────────

    def add(self, name: str) -> Habit | None:
        """Append a habit. Blank names are ignored (returns None)."""
        name = (name or "").strip()
        if not name:
            return None
        day = self.cursor.date
        habit = Habit(id=str(uuid.uuid4()), name=name, done=False)
        self._save(self.items(day) + [habit], day)
        return habit

    def toggle(self, habit_id: str) -> Habit | None:
        day = self.cursor.date
        habits = self.items(day)
        for h in habits:
            if h.id == habit_id:
                h.done = not h.done
                self._save(habits, day)
                return h
        return None

    def remove(self, habit_id: str) -> bool:
        day = self.cursor.date
        habits = self.items(day)
        remaining = [h for h in habits if h.id != habit_id]
        if len(remaining) == len(habits):
            return False
        self._save(remaining, day)
        return True
