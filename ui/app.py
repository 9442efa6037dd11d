from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Iterator

from fastapi import BackgroundTasks, Body, Depends, FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from dayplan import Planner, __version__
from dayplan.models import PRIORITY_NAMES

ASSET_V = "20261017-01"


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _options(values: list[tuple[str, str]], selected: str) -> str:
    return "".join(
        f'<option value="{_escape(v)}"{" selected" if v == selected else ""}>{_escape(label)}</option>'
        for v, label in values
    )


def _post_button(action: str, label: str, cls: str = "ghost") -> str:
    return (
        f'<form method="post" action="{_escape(action)}" class="inline">'
        f'<button type="submit" class="{cls}">{label}</button></form>'
    )


# ── App ───────────────────────────────────────────────────────

app = FastAPI(title="dayplan UI", version=__version__)

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")


# One request at a time touches the store; a running timer posts a tick
# every second alongside notes and task edits.
_store_lock = threading.Lock()


def get_planner() -> Iterator[Planner]:
    with _store_lock:
        yield Planner.open()


def _back() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


def _schedule_hooks(planner: Planner, background: BackgroundTasks) -> None:
    events = planner.take_events()
    if events:
        background.add_task(planner.run_hooks, events)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(planner: Planner = Depends(get_planner)) -> HTMLResponse:
    snap = planner.snapshot()
    timer = snap["timer"]

    task_rows = []
    for t in snap["tasks"]:
        tid = _escape(t["id"])
        when = f'<span class="muted small">@{_escape(t["when"])}</span>' if t["when"] else ""
        area = f'<span class="muted small">[{_escape(t["area"])}]</span>' if t["area"] else ""
        task_rows.append(
            f"""
            <li class="row{' done' if t['done'] else ''}" data-task="{tid}">
              <form method="post" action="/tasks/{tid}/toggle" class="inline">
                <button type="submit" class="check" aria-label="toggle">{'&#9745;' if t['done'] else '&#9744;'}</button>
              </form>
              <span class="badge prio-{t['priority']}">{t['priority']}</span>
              <span class="grow">{_escape(t['text'])} {when} {area}</span>
              {_post_button(f"/tasks/{tid}/delete", "&#128465;", "icon")}
            </li>"""
        )

    habit_rows = []
    for h in snap["habits"]:
        hid = _escape(h["id"])
        habit_rows.append(
            f"""
            <li class="row{' done' if h['done'] else ''}" data-habit="{hid}">
              <form method="post" action="/habits/{hid}/toggle" class="inline">
                <button type="submit" class="check" aria-label="toggle">{'&#9745;' if h['done'] else '&#9744;'}</button>
              </form>
              <span class="grow">{_escape(h['name'])}</span>
              {_post_button(f"/habits/{hid}/delete", "&#128465;", "icon")}
            </li>"""
        )

    priorities = [(k, v) for k, v in PRIORITY_NAMES.items()]
    categories = [(c, c) for c in snap["categories"]]
    mode_label = "Work sprint" if timer["mode"] == "work" else "Break"

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Daily Planner</title>
  <link rel="stylesheet" href="/static/style.css?v={ASSET_V}" />
</head>
<body>
  <div class="container">
    <header class="top">
      <div>
        <h1>Daily Planner</h1>
        <div class="muted">Plan your day with tasks, habits, and focus sessions.</div>
      </div>
      <button id="print" class="ghost no-print" type="button">&#128424; Print</button>
    </header>

    <section class="card datebar no-print">
      {_post_button("/date/move?delta=-1", "&lsaquo; Prev")}
      <form method="post" action="/date" class="inline">
        <input type="date" name="date" value="{snap['date']}" onchange="this.form.submit()" />
      </form>
      {_post_button("/date/today", "Today")}
      {_post_button("/date/move?delta=1", "Next &rsaquo;")}
      <div class="muted small right">&#128197; {_escape(snap['label'])}</div>
    </section>

    <section class="grid">
      <div class="card wide">
        <h2>Tasks <span class="muted small">{snap['tasks_done']}/{len(snap['tasks'])} done</span></h2>
        <form method="post" action="/tasks" class="taskform no-print">
          <input name="text" placeholder="Add a task…" autocomplete="off" />
          <select name="priority">{_options(priorities, "M")}</select>
          <input type="time" name="when" />
          <select name="area">{_options(categories, planner.config.default_category)}</select>
          <button type="submit">+ Add</button>
        </form>
        <div class="no-print">{_post_button("/tasks/clear_completed", "Clear Completed")}</div>
        <ul class="list">{''.join(task_rows) if task_rows else '<li class="muted small">No tasks for this day.</li>'}</ul>
      </div>

      <div class="side">
        <div class="card" id="timer" data-running="{str(timer['running']).lower()}">
          <h2>Focus Timer</h2>
          <div class="muted small"><span id="timerMode">{mode_label}</span> · stay focused in short bursts.</div>
          <div class="clock" id="timerClock">{timer['display']}</div>
          <div class="no-print">
            <button id="timerToggle" type="button">{'Pause' if timer['running'] else 'Start'}</button>
            <button id="timerReset" type="button" class="ghost">Reset</button>
          </div>
          <div class="muted small no-print settings">
            <label>Work <input id="timerDuration" type="number" min="1" value="{timer['duration']}" /> min</label>
            <label>Break <input id="timerBreak" type="number" min="1" value="{timer['break']}" /> min</label>
          </div>
        </div>

        <div class="card">
          <h2>Habits</h2>
          <form method="post" action="/habits" class="habitform no-print">
            <input name="name" placeholder="Add habit…" autocomplete="off" />
            <button type="submit">+ Add</button>
          </form>
          <ul class="list">{''.join(habit_rows) if habit_rows else '<li class="muted small">No habits for this day.</li>'}</ul>
          <div class="muted small">Completion: {snap['habits_percent']}%</div>
        </div>

        <div class="card">
          <h2>Notes</h2>
          <textarea id="notes" rows="5" placeholder="Brain dump, gratitude, reminders…">{_escape(snap['notes'])}</textarea>
          <div class="muted small no-print">Auto-saves. Status: <span id="saveStatus">saved</span></div>
        </div>
      </div>
    </section>
    <footer class="muted small no-print">dayplan v{__version__} · state lives in <code>{_escape(str(planner.root or ''))}/store.json</code></footer>
  </div>

  <script src="/static/app.js?v={ASSET_V}"></script>
</body>
</html>"""
    return HTMLResponse(html)


# ── Date navigation ───────────────────────────────────────────

@app.post("/date")
def set_date(date: str = Form(...), planner: Planner = Depends(get_planner)) -> RedirectResponse:
    try:
        planner.cursor.set_date(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _back()


@app.post("/date/move")
def move_date(delta: int = 1, planner: Planner = Depends(get_planner)) -> RedirectResponse:
    try:
        planner.cursor.move(delta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _back()


@app.post("/date/today")
def date_today(planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.cursor.today()
    return _back()


# ── Tasks ─────────────────────────────────────────────────────

@app.post("/tasks")
def add_task(
    text: str = Form(""),
    priority: str = Form("M"),
    when: str = Form(""),
    area: str = Form(""),
    planner: Planner = Depends(get_planner),
) -> RedirectResponse:
    planner.tasks.add(text, priority=priority, time=when, category=area)
    return _back()


@app.post("/tasks/clear_completed")
def clear_completed(planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.tasks.clear_completed()
    return _back()


@app.post("/tasks/{task_id}/toggle")
def toggle_task(task_id: str, background: BackgroundTasks, planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.toggle_task(task_id)
    _schedule_hooks(planner, background)
    return _back()


@app.post("/tasks/{task_id}/delete")
def delete_task(task_id: str, planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.tasks.remove(task_id)
    return _back()


# ── Habits ────────────────────────────────────────────────────

@app.post("/habits")
def add_habit(name: str = Form(""), planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.habits.add(name)
    return _back()


@app.post("/habits/{habit_id}/toggle")
def toggle_habit(habit_id: str, background: BackgroundTasks, planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.toggle_habit(habit_id)
    _schedule_hooks(planner, background)
    return _back()


@app.post("/habits/{habit_id}/delete")
def delete_habit(habit_id: str, planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.habits.remove(habit_id)
    return _back()


# ── Notes ─────────────────────────────────────────────────────

@app.post("/notes")
def save_notes(text: str = Form(""), planner: Planner = Depends(get_planner)) -> RedirectResponse:
    planner.notes.set_text(text)
    return _back()


@app.post("/api/notes")
def api_notes(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    text = payload.get("text", "")
    if not isinstance(text, str):
        raise HTTPException(status_code=400, detail="text must be a string")
    saved = planner.notes.set_text(text)
    return {"ok": saved, "date": planner.date}


# ── JSON API ──────────────────────────────────────────────────

@app.get("/api/day")
def api_day(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return planner.snapshot()


def _timer_payload(planner: Planner) -> dict[str, Any]:
    return dict(planner.timer.state().to_dict(), display=planner.timer.display())


@app.get("/api/timer")
def api_timer(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return _timer_payload(planner)


@app.post("/api/timer/settings")
def api_timer_settings(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    """Change work/break lengths; invalid lengths are ignored."""
    applied: dict[str, bool] = {}
    if "duration" in payload:
        applied["duration"] = planner.timer.set_duration(payload["duration"])
    if "break" in payload:
        applied["break"] = planner.timer.set_break(payload["break"])
    return dict(_timer_payload(planner), applied=applied)


@app.post("/api/timer/{action}")
def api_timer_action(action: str, background: BackgroundTasks, planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    if action == "start":
        planner.timer.start()
    elif action == "pause":
        planner.timer.pause()
    elif action == "toggle":
        planner.timer.toggle()
    elif action == "reset":
        planner.timer.reset()
    elif action == "tick":
        planner.tick()
        _schedule_hooks(planner, background)
    else:
        raise HTTPException(status_code=404, detail=f"Unknown timer action: {action}")
    return _timer_payload(planner)


@app.get("/export")
def export_day(planner: Planner = Depends(get_planner)) -> PlainTextResponse:
    return PlainTextResponse(planner.export_day(), media_type="text/markdown")
