"""dayplan core library: local store, date cursor, focus timer, day lists.

Public API re-exports for convenient imports:
    from dayplan import Planner, LocalStore, FocusTimer, ...
"""

__version__ = "0.1.0"

# Workspace & paths
from dayplan.workspace import (
    workspace_root,
    get_user_timezone,
    local_today,
    store_path,
    config_path,
    hooks_config_path,
    log_path,
    export_path,
)

# File I/O
from dayplan.fileio import (
    file_lock,
    read_text,
    read_yaml,
    write_text_atomic,
    write_yaml_atomic,
)

# Configuration & logging
from dayplan.config import PlannerConfig, load_config, save_config
from dayplan.log import setup_logging

# Store
from dayplan.store import (
    Cell,
    LocalStore,
    MemoryStore,
    QuotaExceededError,
    StoreError,
)

# Models
from dayplan.models import (
    Task,
    Habit,
    HabitLoad,
    TimerState,
    normalize_priority,
    normalize_time,
)

# Components
from dayplan.datecursor import DateCursor, parse_iso_date
from dayplan.focus import FocusTimer, TickHandle, format_clock
from dayplan.tasks import TaskList, sort_tasks
from dayplan.habits import HabitList, completion_percent
from dayplan.notes import NotesPad
from dayplan.hooks import HookResult, run_hooks
from dayplan.planner import HookEvent, Planner
