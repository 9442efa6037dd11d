"""Tests for dayplan/models.py: record serialization and normalization."""

import pytest

from dayplan.models import (
    Habit,
    Task,
    TimerState,
    normalize_priority,
    normalize_time,
)


@pytest.mark.parametrize(
    "value,expected",
    [("H", "H"), ("high", "H"), ("Low", "L"), ("m", "M"), ("", "M"), (None, "M"), ("urgent", "M")],
)
def test_normalize_priority(value, expected):
    assert normalize_priority(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [("09:30", "09:30"), ("9:30", "09:30"), ("23:59", "23:59"), ("24:00", ""), ("12:60", ""), ("", ""), (None, ""), ("noon", "")],
)
def test_normalize_time(value, expected):
    assert normalize_time(value) == expected


def test_task_uses_stored_key_names():
    task = Task(id="t1", text="Gym", priority="H", time="18:00", category="Health", done=True)
    d = task.to_dict()
    assert d == {"id": "t1", "text": "Gym", "priority": "H", "when": "18:00", "area": "Health", "done": True}
    assert Task.from_dict(d) == task


def test_task_from_partial_dict():
    task = Task.from_dict({"id": "t2", "text": "Read", "extra": 1})
    assert task.priority == "M"
    assert task.time == ""
    assert task.done is False
    assert task.priority_name == "Medium"


def test_habit_roundtrip():
    habit = Habit(id="h1", name="Stretch", done=True)
    assert Habit.from_dict(habit.to_dict()) == habit
    assert Habit.from_dict({}).done is False


def test_timer_state_lengths():
    state = TimerState(duration=30, break_minutes=10, seconds=12, mode="break")
    assert state.length_seconds() == 600
    assert state.length_seconds("work") == 1800
    assert state.to_dict()["break"] == 10
