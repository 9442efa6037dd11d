"""Tests for ui/app.py: FastAPI routes over a workspace store."""

import threading
from datetime import date

import pytest
from fastapi.testclient import TestClient

from dayplan.planner import Planner
from dayplan.store import LocalStore
from dayplan.workspace import store_path
from ui.app import app, get_planner


@pytest.fixture
def client(workspace):
    def _planner():
        return Planner(LocalStore(store_path(workspace)), root=workspace, today=lambda: date(2024, 2, 28))

    app.dependency_overrides[get_planner] = _planner
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _day(client):
    return client.get("/api/day").json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_renders(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Daily Planner" in r.text
    assert "Wednesday, February 28" in r.text
    assert "Hydrate (8 glasses)" in r.text
    assert 'data-running="false"' in r.text


def test_add_toggle_delete_task(client):
    r = client.post("/tasks", data={"text": "Write <report>", "priority": "H", "when": "09:00", "area": "Work"})
    assert r.status_code == 200  # followed the redirect back to /
    assert "Write &lt;report&gt;" in r.text

    [task] = _day(client)["tasks"]
    assert task["priority"] == "H"
    assert task["when"] == "09:00"
    assert task["area"] == "Work"

    client.post(f"/tasks/{task['id']}/toggle")
    assert _day(client)["tasks"][0]["done"] is True

    client.post("/tasks/clear_completed")
    assert _day(client)["tasks"] == []

    client.post("/tasks", data={"text": "again"})
    [task] = _day(client)["tasks"]
    assert task["area"] == "General"
    client.post(f"/tasks/{task['id']}/delete")
    assert _day(client)["tasks"] == []


def test_blank_task_is_ignored(client):
    client.post("/tasks", data={"text": "   "})
    assert _day(client)["tasks"] == []


def test_redirect_is_see_other(client):
    r = client.post("/tasks", data={"text": "x"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"


def test_date_navigation(client):
    client.post("/date/move?delta=1")
    assert _day(client)["date"] == "2024-02-29"
    client.post("/date", data={"date": "2024-12-31"})
    client.post("/date/move?delta=1")
    assert _day(client)["date"] == "2025-01-01"
    client.post("/date/today")
    assert _day(client)["date"] == "2024-02-28"


def test_bad_date_is_rejected(client):
    r = client.post("/date", data={"date": "2024-02-30"})
    assert r.status_code == 400
    assert _day(client)["date"] == "2024-02-28"


def test_habits(client):
    client.post("/habits", data={"name": "Stretch"})
    habits = _day(client)["habits"]
    assert [h["name"] for h in habits][-1] == "Stretch"
    assert _day(client)["habits_seeded"] is False

    client.post(f"/habits/{habits[0]['id']}/toggle")
    assert _day(client)["habits_percent"] == 25

    client.post(f"/habits/{habits[0]['id']}/delete")
    assert len(_day(client)["habits"]) == 3


def test_notes(client):
    r = client.post("/api/notes", json={"text": "  keep spacing  "})
    assert r.json() == {"ok": True, "date": "2024-02-28"}
    assert _day(client)["notes"] == "  keep spacing  "

    assert client.post("/api/notes", json={"text": 5}).status_code == 400

    client.post("/notes", data={"text": "from the form"})
    assert _day(client)["notes"] == "from the form"


def test_timer_actions(client):
    t = client.get("/api/timer").json()
    assert t["display"] == "25:00"
    assert t["running"] is False

    assert client.post("/api/timer/tick").json()["seconds"] == 1500  # paused

    assert client.post("/api/timer/start").json()["running"] is True
    t = client.post("/api/timer/tick").json()
    assert t["seconds"] == 1499
    assert t["display"] == "24:59"

    assert client.post("/api/timer/toggle").json()["running"] is False
    t = client.post("/api/timer/reset").json()
    assert t["seconds"] == 1500
    assert client.post("/api/timer/pause").json()["running"] is False


def test_unknown_timer_action(client):
    assert client.post("/api/timer/explode").status_code == 404


def test_timer_settings(client):
    t = client.post("/api/timer/settings", json={"duration": 50, "break": "abc"}).json()
    assert t["applied"] == {"duration": True, "break": False}
    assert t["duration"] == 50
    assert t["break"] == 5
    assert t["display"] == "50:00"


def test_export(client):
    client.post("/tasks", data={"text": "Printable", "priority": "L"})
    r = client.get("/export")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/markdown")
    assert "- [ ] (Low) Printable [General]" in r.text


def test_state_lives_in_store_file(client, workspace):
    client.post("/tasks", data={"text": "durable"})
    store = LocalStore(store_path(workspace))
    assert [t["text"] for t in store.read("tasks_2024-02-28")] == ["durable"]


def test_move_past_last_date_is_rejected(client):
    client.post("/date", data={"date": "9999-12-31"})
    r = client.post("/date/move?delta=1")
    assert r.status_code == 400
    assert _day(client)["date"] == "9999-12-31"


def test_ticks_do_not_undo_notes_saved_in_between(workspace):
    # default dependency: each request opens the workspace store afresh
    with TestClient(app) as c:
        c.post("/api/timer/start")
        c.post("/api/timer/tick")
        c.post("/api/notes", json={"text": "typed while running"})
        c.post("/api/timer/tick")
        c.post("/tasks", data={"text": "added while running"})
        c.post("/api/timer/tick")
        day = c.get("/api/day").json()

    assert day["notes"] == "typed while running"
    assert [t["text"] for t in day["tasks"]] == ["added while running"]
    assert day["timer"]["seconds"] == 25 * 60 - 3


def test_concurrent_requests_keep_every_write(workspace):
    with TestClient(app) as c:
        c.post("/api/timer/start")

        def tick():
            for _ in range(5):
                c.post("/api/timer/tick")

        def add_tasks():
            for i in range(5):
                c.post("/tasks", data={"text": f"task {i}"})

        threads = [threading.Thread(target=tick), threading.Thread(target=add_tasks)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        day = c.get("/api/day").json()

    assert len(day["tasks"]) == 5
    assert day["timer"]["seconds"] == 25 * 60 - 5


def test_page_script_releases_its_interval(client):
    js = client.get("/static/app.js").text
    assert js.count("setInterval(") == 1
    assert "clearInterval(interval)" in js
    assert 'addEventListener("pagehide", release)' in js
    # Start/Pause follows the server's running flag, not the local interval
    assert "running = t.running;" in js
    assert 'post(running ? "/api/timer/pause" : "/api/timer/start")' in js
