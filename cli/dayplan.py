#!/usr/bin/env python3
"""dayplan TUI: tasks, habits, focus timer and notes for one day, powered by Textual."""

from __future__ import annotations

import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
    TextArea,
)

from dayplan import Planner, TickHandle, workspace_root
from dayplan.models import PRIORITY_NAMES, WORK, Habit, Task
from dayplan.planner import HookEvent


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#date-bar {
    dock: top;
    height: 3;
    background: $primary-background;
    padding: 0 1;
}

#date-bar Button {
    min-width: 8;
    margin: 0 1 0 0;
}

#date-input {
    width: 16;
}

#date-label {
    width: 1fr;
    content-align: right middle;
    color: $text-muted;
    padding: 1 1 0 0;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 3fr;
    min-width: 40;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 2fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#task-form {
    height: auto;
}

#task-text {
    width: 2fr;
}

#task-priority, #task-category {
    width: 1fr;
}

#task-time {
    width: 10;
}

.button-row, .form-row, .settings-row {
    height: auto;
}

.button-row Button {
    margin: 0 1 0 0;
}

.form-row Input {
    width: 1fr;
}

.settings-row Label {
    padding: 1 1 0 0;
}

.settings-row Input {
    width: 10;
}

#task-list, #habit-list {
    height: auto;
}

.item-row {
    height: auto;
}

.item-row Checkbox {
    width: 1fr;
    height: auto;
}

.item-row .badge {
    width: 3;
    padding: 1 0 0 1;
    text-style: bold;
}

.badge.prio-H { color: $error; }
.badge.prio-M { color: $warning; }
.badge.prio-L { color: $success; }

.item-row .meta {
    width: auto;
    color: $text-muted;
    padding: 1 1 0 0;
}

.item-row .delete {
    min-width: 5;
    width: 5;
}

.item-done {
    opacity: 50%;
}

.item-done Checkbox {
    text-style: strike;
}

#timer-clock {
    height: 3;
    content-align: center middle;
    text-style: bold;
}

#timer-mode, #habit-completion, .empty {
    color: $text-muted;
    padding: 0 1;
}

#notes-area {
    height: 8;
    min-height: 4;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class TaskRow(Horizontal):
    """A task: checkbox + priority badge + time/category + delete."""

    def __init__(self, task: Task, **kwargs) -> None:
        super().__init__(**kwargs)
        self.task_id = task.id
        self.item = task

    def compose(self) -> ComposeResult:
        t = self.item
        yield Checkbox(t.text, value=t.done, classes="task-check")
        yield Static(t.priority, classes=f"badge prio-{t.priority}")
        meta = " ".join(p for p in (f"@{t.time}" if t.time else "", f"[{t.category}]" if t.category else "") if p)
        yield Static(meta, classes="meta")
        yield Button("✕", classes="delete task-delete")

    def on_mount(self) -> None:
        self.add_class("item-row")
        if self.item.done:
            self.add_class("item-done")


class HabitRow(Horizontal):
    """A habit: checkbox + delete."""

    def __init__(self, habit: Habit, **kwargs) -> None:
        super().__init__(**kwargs)
        self.habit_id = habit.id
        self.item = habit

    def compose(self) -> ComposeResult:
        yield Checkbox(self.item.name, value=self.item.done, classes="habit-check")
        yield Button("✕", classes="delete habit-delete")

    def on_mount(self) -> None:
        self.add_class("item-row")
        if self.item.done:
            self.add_class("item-done")


# ── Main app ───────────────────────────────────────────────────


class DayPlanApp(App):
    """Daily planner: one day of tasks, habits and notes plus a focus timer."""

    TITLE = "Daily Planner"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("left_square_bracket", "prev_day", "Prev"),
        Binding("right_square_bracket", "next_day", "Next"),
        Binding("t", "today", "Today"),
        Binding("s", "toggle_timer", "Start/Pause"),
        Binding("r", "reset_timer", "Reset"),
        Binding("p", "print_day", "Print"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, planner: Planner) -> None:
        super().__init__()
        self.planner = planner
        self._ticker = TickHandle(lambda callback: self.set_interval(1.0, callback))

    def compose(self) -> ComposeResult:
        categories = self.planner.config.categories
        yield Header()
        yield Horizontal(
            Button("‹ Prev", id="prev-day"),
            Input(placeholder="YYYY-MM-DD", id="date-input"),
            Button("Today", id="today"),
            Button("Next ›", id="next-day"),
            Static(id="date-label"),
            id="date-bar",
        )
        yield Horizontal(
            VerticalScroll(
                Label("Tasks", classes="section-title", id="tasks-title"),
                Horizontal(
                    Input(placeholder="Add a task…", id="task-text"),
                    Select(
                        [(name, key) for key, name in PRIORITY_NAMES.items()],
                        value="M",
                        allow_blank=False,
                        id="task-priority",
                    ),
                    Input(placeholder="HH:MM", id="task-time", max_length=5),
                    Select(
                        [(c, c) for c in categories],
                        value=self.planner.config.default_category,
                        allow_blank=False,
                        id="task-category",
                    ),
                    id="task-form",
                ),
                Horizontal(
                    Button("Add", id="add-task", variant="primary"),
                    Button("Clear Completed", id="clear-completed"),
                    classes="button-row",
                ),
                Vertical(id="task-list"),
                id="left-pane",
                can_focus=False,
            ),
            VerticalScroll(
                Label("Focus Timer", classes="section-title"),
                Static(id="timer-mode"),
                Static(id="timer-clock"),
                Horizontal(
                    Button("Start", id="timer-toggle", variant="primary"),
                    Button("Reset", id="timer-reset"),
                    classes="button-row",
                ),
                Horizontal(
                    Label("Work"),
                    Input(id="timer-duration", type="integer"),
                    Label("Break"),
                    Input(id="timer-break", type="integer"),
                    classes="settings-row",
                ),
                Label("Habits", classes="section-title"),
                Horizontal(
                    Input(placeholder="Add habit…", id="habit-name"),
                    Button("Add", id="add-habit"),
                    classes="form-row",
                ),
                Vertical(id="habit-list"),
                Static(id="habit-completion"),
                Label("Notes", classes="section-title"),
                TextArea(id="notes-area"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._load_day()
        self._render_timer()
        # a timer left running resumes from its stored countdown
        self._sync_ticker()

    def on_unmount(self) -> None:
        self._ticker.release()

    # ── Rendering ──────────────────────────────────────────────

    def _load_day(self) -> None:
        """(Re)load everything scoped to the selected date."""
        cursor = self.planner.cursor
        self.query_one("#date-input", Input).value = cursor.date
        self.query_one("#date-label", Static).update(cursor.label())
        self.sub_title = cursor.date + ("  (today)" if cursor.is_today() else "")
        self._render_tasks()
        self._render_habits()
        self.query_one("#notes-area", TextArea).load_text(self.planner.notes.text())

    def _render_tasks(self) -> None:
        task_list = self.query_one("#task-list", Vertical)
        task_list.remove_children()
        rows = [TaskRow(t) for t in self.planner.tasks.sorted()]
        if rows:
            task_list.mount(*rows)
        else:
            task_list.mount(Static("No tasks for this day.", classes="empty"))
        self._update_task_title()

    def _update_task_title(self) -> None:
        done, total = self.planner.tasks.counts()
        self.query_one("#tasks-title", Label).update(f"Tasks  {done}/{total} done")

    def _render_habits(self) -> None:
        habit_list = self.query_one("#habit-list", Vertical)
        habit_list.remove_children()
        rows = [HabitRow(h) for h in self.planner.habits.items()]
        if rows:
            habit_list.mount(*rows)
        else:
            habit_list.mount(Static("No habits for this day.", classes="empty"))
        self._update_habit_completion()

    def _update_habit_completion(self) -> None:
        self.query_one("#habit-completion", Static).update(
            f"Completion: {self.planner.habits.completion_percent()}%"
        )

    def _render_timer(self) -> None:
        timer = self.planner.timer
        self.query_one("#timer-clock", Static).update(timer.display())
        self.query_one("#timer-mode", Static).update(
            "Work sprint: stay focused in short bursts." if timer.mode == WORK else "Break"
        )
        self.query_one("#timer-toggle", Button).label = "Pause" if timer.running else "Start"
        duration = self.query_one("#timer-duration", Input)
        if not duration.has_focus:
            duration.value = str(timer.duration)
        brk = self.query_one("#timer-break", Input)
        if not brk.has_focus:
            brk.value = str(timer.break_minutes)

    # ── Focus timer ────────────────────────────────────────────

    def _sync_ticker(self) -> None:
        self._ticker.sync(self.planner.timer.running, self._on_tick)

    def _on_tick(self) -> None:
        new_mode = self.planner.tick()
        if new_mode is not None:
            message = "Break time." if new_mode != WORK else "Back to work."
            self.notify(message, title="Focus Timer", severity="information")
            self.bell()
        self._fire_hooks()
        self._render_timer()

    def action_toggle_timer(self) -> None:
        self.planner.timer.toggle()
        self._sync_ticker()
        self._render_timer()

    def action_reset_timer(self) -> None:
        self.planner.timer.reset()
        self._sync_ticker()
        self._render_timer()

    @on(Button.Pressed, "#timer-toggle")
    def _on_timer_toggle(self) -> None:
        self.action_toggle_timer()

    @on(Button.Pressed, "#timer-reset")
    def _on_timer_reset(self) -> None:
        self.action_reset_timer()

    @on(Input.Submitted, "#timer-duration")
    def _on_duration_submitted(self, event: Input.Submitted) -> None:
        if not self.planner.timer.set_duration(event.value):
            self.notify("Work length must be a positive number of minutes.", severity="warning")
        self.set_focus(None)
        self._render_timer()

    @on(Input.Submitted, "#timer-break")
    def _on_break_submitted(self, event: Input.Submitted) -> None:
        if not self.planner.timer.set_break(event.value):
            self.notify("Break length must be a positive number of minutes.", severity="warning")
        self.set_focus(None)
        self._render_timer()

    # ── Date navigation ────────────────────────────────────────

    def _move_day(self, delta: int) -> None:
        try:
            self.planner.cursor.move(delta)
        except ValueError as e:
            self.notify(str(e), severity="warning")
            return
        self._load_day()

    def action_prev_day(self) -> None:
        self._move_day(-1)

    def action_next_day(self) -> None:
        self._move_day(1)

    def action_today(self) -> None:
        self.planner.cursor.today()
        self._load_day()

    @on(Button.Pressed, "#prev-day")
    def _on_prev(self) -> None:
        self.action_prev_day()

    @on(Button.Pressed, "#next-day")
    def _on_next(self) -> None:
        self.action_next_day()

    @on(Button.Pressed, "#today")
    def _on_today(self) -> None:
        self.action_today()

    @on(Input.Submitted, "#date-input")
    def _on_date_submitted(self, event: Input.Submitted) -> None:
        try:
            self.planner.cursor.set_date(event.value)
        except ValueError:
            self.notify(f"Not a date: {event.value!r} (use YYYY-MM-DD)", severity="warning")
        self.set_focus(None)
        self._load_day()

    # ── Tasks ──────────────────────────────────────────────────

    def _add_task(self) -> None:
        text_input = self.query_one("#task-text", Input)
        time_input = self.query_one("#task-time", Input)
        priority = self.query_one("#task-priority", Select).value
        category = self.query_one("#task-category", Select).value
        task = self.planner.tasks.add(
            text_input.value,
            priority=str(priority),
            time=time_input.value,
            category=str(category),
        )
        if task is None:
            return
        text_input.value = ""
        time_input.value = ""
        self._render_tasks()

    @on(Button.Pressed, "#add-task")
    def _on_add_task(self) -> None:
        self._add_task()

    @on(Input.Submitted, "#task-text")
    @on(Input.Submitted, "#task-time")
    def _on_task_submitted(self) -> None:
        self._add_task()

    @on(Button.Pressed, "#clear-completed")
    def _on_clear_completed(self) -> None:
        if self.planner.tasks.clear_completed():
            self._render_tasks()

    @on(Checkbox.Changed, ".task-check")
    def _on_task_check(self, event: Checkbox.Changed) -> None:
        row = event.checkbox.parent
        if not isinstance(row, TaskRow):
            return
        task = self.planner.toggle_task(row.task_id)
        if task is None:
            return
        row.set_class(task.done, "item-done")
        self._update_task_title()
        self._fire_hooks()

    @on(Button.Pressed, ".task-delete")
    def _on_task_delete(self, event: Button.Pressed) -> None:
        row = event.button.parent
        if isinstance(row, TaskRow) and self.planner.tasks.remove(row.task_id):
            self._render_tasks()

    # ── Habits ─────────────────────────────────────────────────

    def _add_habit(self) -> None:
        name_input = self.query_one("#habit-name", Input)
        if self.planner.habits.add(name_input.value) is None:
            return
        name_input.value = ""
        self._render_habits()

    @on(Button.Pressed, "#add-habit")
    def _on_add_habit(self) -> None:
        self._add_habit()

    @on(Input.Submitted, "#habit-name")
    def _on_habit_submitted(self) -> None:
        self._add_habit()

    @on(Checkbox.Changed, ".habit-check")
    def _on_habit_check(self, event: Checkbox.Changed) -> None:
        row = event.checkbox.parent
        if not isinstance(row, HabitRow):
            return
        habit = self.planner.toggle_habit(row.habit_id)
        if habit is None:
            return
        row.set_class(habit.done, "item-done")
        self._update_habit_completion()
        self._fire_hooks()

    @on(Button.Pressed, ".habit-delete")
    def _on_habit_delete(self, event: Button.Pressed) -> None:
        row = event.button.parent
        if isinstance(row, HabitRow) and self.planner.habits.remove(row.habit_id):
            self._render_habits()

    # ── Notes (auto-save on every change) ──────────────────────

    @on(TextArea.Changed, "#notes-area")
    def _on_notes_change(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        # load_text() on a date switch also lands here; skip the no-op write
        if text != self.planner.notes.text():
            self.planner.notes.set_text(text)

    # ── Hooks, print, misc ─────────────────────────────────────

    def _fire_hooks(self) -> None:
        events = self.planner.take_events()
        if events:
            self._run_hooks(events)

    @work(thread=True)
    def _run_hooks(self, events: list[HookEvent]) -> None:
        for result in self.planner.run_hooks(events):
            if not result.ok:
                self.call_from_thread(
                    self.notify,
                    f"{result.command}: {result.summary()}",
                    title=f"Hook {result.hook_point} failed",
                    severity="warning",
                )

    def action_print_day(self) -> None:
        try:
            path = self.planner.export_day_to_file()
        except OSError as e:
            self.notify(f"Export failed: {e}", title="Print", severity="error")
            return
        self.notify(f"Saved {path}", title="Print", severity="information")

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        self._ticker.release()
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Cannot create workspace {root}: {e}")
        print("Set DAYPLAN_ROOT to a writable directory.")
        sys.exit(1)

    app = DayPlanApp(Planner.open(root))
    app.run()


if __name__ == "__main__":
    main()
