"""Pomodoro-style focus timer for dayplan.

A two-phase (work/break) countdown driven by a one-second tick. All timer
state is global (not date-scoped) and persisted under the pomodoro_* keys.
The countdown only advances while something calls tick(); there is no
wall-clock anchor, so a paused or unloaded timer simply stops where it was.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from dayplan.models import BREAK, MODES, WORK, TimerState
from dayplan.store import Cell, MemoryStore

log = logging.getLogger(__name__)


def format_clock(seconds: int) -> str:
    """Render remaining seconds as MM:SS, never below 00:00."""
    s = max(int(seconds), 0)
    return f"{s // 60:02d}:{s % 60:02d}"


def _valid_minutes(value: Any) -> int | None:
    """A positive whole number of minutes (int or digit string), else None."""
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


class FocusTimer:
    def __init__(self, store: MemoryStore, default_duration: int = 25, default_break: int = 5) -> None:
        self._duration = Cell(store, "pomodoro_duration", default_duration)
        self._break = Cell(store, "pomodoro_break", default_break)
        self._seconds = Cell(store, "pomodoro_seconds", self.duration * 60)
        self._running = Cell(store, "pomodoro_running", False)
        self._mode = Cell(store, "pomodoro_mode", WORK)
        # every pomodoro_* key exists from the moment a timer is shown
        for cell in (self._duration, self._break, self._seconds, self._running, self._mode):
            store.write_default(cell.key, cell.default)

    # ── state accessors ────────────────────────────────────────

    @property
    def duration(self) -> int:
        return _valid_minutes(self._duration.get()) or self._duration.default

    @property
    def break_minutes(self) -> int:
        return _valid_minutes(self._break.get()) or self._break.default

    @property
    def seconds(self) -> int:
        value = self._seconds.get()
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return self.duration * 60
        return int(value)

    @property
    def running(self) -> bool:
        return bool(self._running.get())

    @property
    def mode(self) -> str:
        mode = self._mode.get()
        return mode if mode in MODES else WORK

    def state(self) -> TimerState:
        return TimerState(
            duration=self.duration,
            break_minutes=self.break_minutes,
            seconds=self.seconds,
            running=self.running,
            mode=self.mode,
        )

    def display(self) -> str:
        return format_clock(self.seconds)

    # ── transitions ────────────────────────────────────────────

    def tick(self) -> str | None:
        """Advance one second. Returns the new mode if the phase changed."""
        if not self.running:
            return None
        remaining = self.seconds - 1
        self._seconds.set(remaining)
        if remaining >= 0:
            return None

        new_mode = BREAK if self.mode == WORK else WORK
        state = self.state()
        self._mode.set(new_mode)
        self._seconds.set(state.length_seconds(new_mode))
        log.info("Focus timer switched to %s", new_mode)
        return new_mode

    def start(self) -> None:
        self._running.set(True)

    def pause(self) -> None:
        self._running.set(False)

    def toggle(self) -> bool:
        running = not self.running
        self._running.set(running)
        return running

    def reset(self) -> None:
        """Stop and rewind the current phase to its full length."""
        self._running.set(False)
        self._seconds.set(self.state().length_seconds())

    def set_duration(self, minutes: Any) -> bool:
        """Set the work length; rewinds the countdown if currently working."""
        n = _valid_minutes(minutes)
        if n is None:
            return False
        self._duration.set(n)
        if self.mode == WORK:
            self._seconds.set(n * 60)
        return True

    def set_break(self, minutes: Any) -> bool:
        """Set the break length; rewinds the countdown if currently on break."""
        n = _valid_minutes(minutes)
        if n is None:
            return False
        self._break.set(n)
        if self.mode == BREAK:
            self._seconds.set(n * 60)
        return True


# ── Interval ownership ────────────────────────────────────────


class Interval(Protocol):
    def stop(self) -> Any: ...


class TickHandle:
    """Owns at most one running one-second interval.

    *start_interval* is called with the tick callback and must return an
    object with a ``stop()`` method (a Textual Timer, for example).
    """

    def __init__(self, start_interval: Callable[[Callable[[], Any]], Interval]) -> None:
        self._start_interval = start_interval
        self._interval: Interval | None = None

    @property
    def active(self) -> bool:
        return self._interval is not None

    def acquire(self, callback: Callable[[], Any]) -> None:
        if self._interval is None:
            self._interval = self._start_interval(callback)

    def release(self) -> None:
        interval, self._interval = self._interval, None
        if interval is not None:
            interval.stop()

    def sync(self, running: bool, callback: Callable[[], Any]) -> None:
        if running:
            self.acquire(callback)
        else:
            self.release()

    def __enter__(self) -> TickHandle:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()
