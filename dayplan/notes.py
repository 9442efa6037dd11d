"""Per-day free-text notes for dayplan."""

from __future__ import annotations

from dayplan.datecursor import DateCursor
from dayplan.store import MemoryStore


def notes_key(day: str) -> str:
    return f"notes_{day}"


class NotesPad:
    def __init__(self, store: MemoryStore, cursor: DateCursor) -> None:
        self.store = store
        self.cursor = cursor

    def text(self, day: str | None = None) -> str:
        value = self.store.read(notes_key(day or self.cursor.date), "")
        return value if isinstance(value, str) else ""

    def set_text(self, value: str) -> bool:
        """Overwrite the selected day's notes verbatim (empty is allowed)."""
        return self.store.write(notes_key(self.cursor.date), value or "")
