"""The planner's "current day", persisted under planner_date."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from typing import Callable

from dayplan.store import Cell, MemoryStore
from dayplan.workspace import local_today

log = logging.getLogger(__name__)

DATE_KEY = "planner_date"
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str | date) -> date:
    """Parse a strict YYYY-MM-DD string. Raises ValueError when malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not _ISO_RE.match(s):
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(s)


class DateCursor:
    def __init__(self, store: MemoryStore, today: Callable[[], date] | None = None) -> None:
        self._today = today or local_today
        self._cell: Cell[str | None] = Cell(store, DATE_KEY, None)

    @property
    def date(self) -> str:
        """The selected day as an ISO string; defaults to today."""
        return self.as_date().isoformat()

    def as_date(self) -> date:
        stored = self._cell.get()
        if stored:
            try:
                return parse_iso_date(stored)
            except (TypeError, ValueError):
                log.warning("Ignoring malformed %s value %r", DATE_KEY, stored)
        return self._today()

    def set_date(self, value: str | date) -> str:
        d = parse_iso_date(value)
        self._cell.set(d.isoformat())
        log.debug("Date set to %s", d)
        return d.isoformat()

    def move(self, delta_days: int) -> str:
        """Shift by whole days. Raises ValueError past the supported date range."""
        try:
            target = self.as_date() + timedelta(days=int(delta_days))
        except OverflowError as e:
            raise ValueError(f"Date out of range: {self.date} {int(delta_days):+d} days") from e
        return self.set_date(target)

    def next(self) -> str:
        return self.move(1)

    def previous(self) -> str:
        return self.move(-1)

    def today(self) -> str:
        return self.set_date(self._today())

    def is_today(self) -> bool:
        return self.as_date() == self._today()

    def label(self) -> str:
        """e.g. 'Saturday, October 17'."""
        d = self.as_date()
        return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}"
