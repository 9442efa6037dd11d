"""Tests for dayplan/planner.py: controller, hook events, export."""

import json

import yaml

from dayplan.planner import Planner
from dayplan.store import LocalStore


def test_date_switch_swaps_every_collection(planner):
    planner.tasks.add("wednesday task")
    planner.habits.add("wednesday habit")
    planner.notes.set_text("wednesday notes")

    planner.cursor.next()
    snap = planner.snapshot()
    assert snap["date"] == "2024-02-29"
    assert snap["tasks"] == []
    assert snap["habits_seeded"] is True
    assert snap["notes"] == ""

    planner.cursor.today()
    snap = planner.snapshot()
    assert [t["text"] for t in snap["tasks"]] == ["wednesday task"]
    assert snap["habits"][-1]["name"] == "wednesday habit"
    assert snap["notes"] == "wednesday notes"


def test_timer_is_not_scoped_by_date(planner):
    planner.timer.start()
    planner.tick()
    planner.cursor.next()
    assert planner.timer.seconds == 25 * 60 - 1
    assert planner.timer.running is True


def test_snapshot_shape(planner):
    planner.tasks.add("b", priority="L")
    t = planner.tasks.add("a", priority="H", time="09:00", category="Work")
    planner.toggle_task(t.id)
    snap = planner.snapshot()
    assert snap["label"] == "Wednesday, February 28"
    assert snap["is_today"] is True
    assert [x["text"] for x in snap["tasks"]] == ["a", "b"]
    assert snap["tasks"][0]["priority_name"] == "High"
    assert snap["tasks_done"] == 1
    assert snap["habits_percent"] == 0
    assert snap["timer"]["display"] == "25:00"
    assert snap["timer"]["mode"] == "work"
    assert "Work" in snap["categories"]
    json.dumps(snap)


def test_completing_a_task_queues_event(planner):
    t = planner.tasks.add("ship it")
    planner.toggle_task(t.id)
    planner.toggle_task(t.id)  # unchecking raises nothing
    [event] = planner.take_events()
    assert event.hook_point == "on_task_complete"
    assert event.context["task"]["text"] == "ship it"
    assert event.context["date"] == "2024-02-28"
    assert planner.take_events() == []


def test_all_habits_done_queues_event(planner):
    ids = [h.id for h in planner.habits.items()]
    for habit_id in ids[:-1]:
        planner.toggle_habit(habit_id)
    assert planner.take_events() == []
    planner.toggle_habit(ids[-1])
    [event] = planner.take_events()
    assert event.hook_point == "on_habits_complete"
    assert event.context == {"date": "2024-02-28", "percent": 100}


def test_phase_change_queues_event(store):
    from datetime import date

    from dayplan.config import PlannerConfig

    p = Planner(store, PlannerConfig(pomodoro_duration=1, pomodoro_break=2), today=lambda: date(2024, 1, 1))
    p.timer.start()
    for _ in range(61):
        p.tick()
    [event] = p.take_events()
    assert event.hook_point == "on_phase_change"
    assert event.context == {"mode": "break", "seconds": 120}


def test_run_hooks_without_workspace_is_noop(planner):
    t = planner.tasks.add("x")
    planner.toggle_task(t.id)
    assert planner.run_hooks(planner.take_events()) == []


def test_export_day(planner):
    planner.tasks.add("Write report", priority="H", time="09:00", category="Work")
    done = planner.tasks.add("Call mom", priority="L", category="Personal")
    planner.toggle_task(done.id)
    planner.toggle_habit(planner.habits.items()[0].id)
    planner.notes.set_text("Remember umbrella")

    text = planner.export_day()
    assert text.startswith("# Daily Plan: Wednesday, February 28 (2024-02-28)\n")
    assert "## Tasks (1/2 done)" in text
    assert "- [ ] (High) Write report @09:00 [Work]" in text
    assert "- [x] (Low) Call mom [Personal]" in text
    assert "## Habits (33% complete)" in text
    assert "- [x] Hydrate (8 glasses)" in text
    assert "## Notes\nRemember umbrella" in text
    assert "- Work: 25 min" in text
    assert "- Break: 5 min" in text


def test_export_empty_day(planner):
    planner.store.write("habits_2024-02-28", [])
    text = planner.export_day()
    assert "## Tasks (0/0 done)\n- (none)" in text
    assert "## Habits (0% complete)\n- (none)" in text
    assert "## Notes\n(none)" in text


def test_open_uses_workspace(workspace):
    planner = Planner.open(workspace)
    assert isinstance(planner.store, LocalStore)
    planner.tasks.add("persisted")
    assert (workspace / "store.json").exists()

    again = Planner.open(workspace)
    assert [t.text for t in again.tasks.items()] == ["persisted"]
    assert (workspace / "logs" / "dayplan.log").exists()


def test_export_day_to_file(workspace):
    planner = Planner.open(workspace)
    planner.notes.set_text("printed")
    path = planner.export_day_to_file()
    assert path == workspace / "exports" / f"{planner.date}.md"
    assert "printed" in path.read_text(encoding="utf-8")


def test_hooks_run_for_queued_events(workspace):
    (workspace / "hooks.yaml").write_text(yaml.dump({"on_task_complete": ["cat"]}), encoding="utf-8")
    planner = Planner.open(workspace)
    t = planner.tasks.add("hooked")
    planner.toggle_task(t.id)
    [result] = planner.run_hooks(planner.take_events())
    assert result.ok
    assert json.loads(result.stdout)["task"]["text"] == "hooked"


def test_stale_planner_does_not_undo_another_planners_write(tmp_path):
    path = tmp_path / "store.json"
    tick_side = Planner(LocalStore(path))
    notes_side = Planner(LocalStore(path))

    tick_side.timer.start()
    notes_side.notes.set_text("important thought")
    tick_side.tick()
    t = notes_side.tasks.add("written in between")
    tick_side.tick()

    reopened = Planner(LocalStore(path))
    assert reopened.notes.text() == "important thought"
    assert [task.id for task in reopened.tasks.items()] == [t.id]
    assert reopened.timer.seconds == 25 * 60 - 2
    assert reopened.timer.running is True
