"""Tests for dayplan/tasks.py: per-day task list."""

from dayplan.models import Task
from dayplan.tasks import sort_tasks


def test_add_prepends_newest_first(planner):
    a = planner.tasks.add("first")
    b = planner.tasks.add("second")
    assert [t.id for t in planner.tasks.items()] == [b.id, a.id]
    assert a.id != b.id
    assert a.done is False


def test_add_blank_is_noop(planner, store):
    assert planner.tasks.add("   ") is None
    assert planner.tasks.add("") is None
    assert planner.tasks.items() == []
    assert store.keys("tasks_") == []


def test_add_trims_and_normalizes(planner):
    task = planner.tasks.add("  Write report  ", priority="High", time="9:30", category="Work")
    assert task.text == "Write report"
    assert task.priority == "H"
    assert task.time == "09:30"
    assert task.category == "Work"


def test_add_defaults(planner):
    task = planner.tasks.add("thing", time="not a time", category="  ")
    assert task.priority == "M"
    assert task.time == ""
    assert task.category == "General"


def test_stored_record_shape(planner, store):
    task = planner.tasks.add("Gym", priority="L", time="18:00", category="Health")
    assert store.read("tasks_2024-02-28") == [
        {"id": task.id, "text": "Gym", "priority": "L", "when": "18:00", "area": "Health", "done": False}
    ]


def test_toggle_twice_restores(planner):
    task = planner.tasks.add("a")
    assert planner.tasks.toggle(task.id).done is True
    assert planner.tasks.toggle(task.id).done is False
    assert planner.tasks.find(task.id).done is False


def test_toggle_unknown_is_noop(planner):
    planner.tasks.add("a")
    assert planner.tasks.toggle("missing") is None


def test_remove(planner):
    a = planner.tasks.add("a")
    b = planner.tasks.add("b")
    assert planner.tasks.remove(a.id) is True
    assert planner.tasks.remove(a.id) is False
    assert [t.id for t in planner.tasks.items()] == [b.id]


def test_clear_completed_is_idempotent(planner):
    a = planner.tasks.add("a")
    planner.tasks.add("b")
    c = planner.tasks.add("c")
    planner.tasks.toggle(a.id)
    planner.tasks.toggle(c.id)

    assert planner.tasks.clear_completed() == 2
    first = planner.tasks.items()
    assert planner.tasks.clear_completed() == 0
    assert planner.tasks.items() == first
    assert [t.text for t in first] == ["b"]


def test_edit(planner):
    task = planner.tasks.add("draft", priority="L")
    edited = planner.tasks.edit(task.id, text="final", priority="H", time="07:05", category="Work")
    assert (edited.text, edited.priority, edited.time, edited.category) == ("final", "H", "07:05", "Work")
    assert planner.tasks.edit(task.id, text="   ").text == "final"
    assert planner.tasks.edit("missing", text="x") is None


def test_display_order_priority_then_time_missing_last():
    tasks = [
        Task(id="m9", priority="M", time="09:00"),
        Task(id="h10", priority="H", time="10:00"),
        Task(id="h-", priority="H", time=""),
    ]
    assert [t.id for t in sort_tasks(tasks)] == ["h10", "h-", "m9"]


def test_display_order_is_stable_and_does_not_touch_storage(planner):
    planner.tasks.add("low", priority="L")
    planner.tasks.add("late", priority="H", time="17:00")
    planner.tasks.add("unscheduled", priority="H")
    planner.tasks.add("early", priority="H", time="08:00")
    planner.tasks.add("also unscheduled", priority="H")

    assert [t.text for t in planner.tasks.sorted()] == [
        "early",
        "late",
        "also unscheduled",
        "unscheduled",
        "low",
    ]
    assert [t.text for t in planner.tasks.items()] == [
        "also unscheduled",
        "early",
        "unscheduled",
        "late",
        "low",
    ]


def test_lists_are_scoped_by_date(planner):
    planner.tasks.add("today's task")
    planner.cursor.move(1)
    assert planner.tasks.items() == []
    planner.tasks.add("tomorrow's task")
    planner.cursor.move(-1)
    assert [t.text for t in planner.tasks.items()] == ["today's task"]


def test_counts(planner):
    a = planner.tasks.add("a")
    planner.tasks.add("b")
    planner.tasks.toggle(a.id)
    assert planner.tasks.counts() == (1, 2)


def test_malformed_stored_list_reads_as_empty(planner, store):
    store.write("tasks_2024-02-28", {"not": "a list"})
    assert planner.tasks.items() == []
    store.write("tasks_2024-02-28", [{"id": "x", "text": "ok", "priority": "high"}, "junk"])
    [task] = planner.tasks.items()
    assert task.priority == "H"
    assert task.category == ""
