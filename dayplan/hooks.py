"""Lifecycle hooks for dayplan.

hooks.yaml in the workspace maps a hook point to a list of shell commands:

    on_task_complete:
      - notify-send "Task done"
      - command: ./log-task.sh
        timeout: 5

Each command gets the event context as JSON on stdin. Hook points:

- on_phase_change     focus timer switched between work and break
- on_task_complete    a task was checked off
- on_habits_complete  every habit for the day is done
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from dayplan.fileio import read_yaml
from dayplan.workspace import hooks_config_path, workspace_root

log = logging.getLogger(__name__)

VALID_HOOK_POINTS = frozenset({"on_phase_change", "on_task_complete", "on_habits_complete"})

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


@dataclass(frozen=True)
class Hook:
    command: str
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def parse(cls, entry: Any) -> Hook | None:
        """A hooks.yaml entry: a command string or a {command, timeout} map."""
        if isinstance(entry, str):
            command, timeout = entry, DEFAULT_TIMEOUT
        elif isinstance(entry, dict):
            command, timeout = entry.get("command", ""), entry.get("timeout", DEFAULT_TIMEOUT)
        else:
            return None
        command = str(command or "").strip()
        if not command:
            return None
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            timeout = DEFAULT_TIMEOUT
        return cls(command=command, timeout=timeout)


@dataclass
class HookResult:
    hook_point: str
    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    error: str = ""  # set when the command timed out or could not start

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def summary(self) -> str:
        return self.error or f"exit {self.exit_code}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "hook_point": self.hook_point,
            "command": self.command,
            "exit_code": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "error": self.error,
        }


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks.yaml; a missing or unreadable file means no hooks."""
    if root is None:
        root = workspace_root()
    path = hooks_config_path(root)
    try:
        return read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        log.warning("Ignoring unreadable hooks config %s: %s", path, e)
        return {}


def hooks_for(hook_point: str, root: Path | None = None) -> list[Hook]:
    if hook_point not in VALID_HOOK_POINTS:
        return []
    entries = load_hooks_config(root).get(hook_point) or []
    if not isinstance(entries, list):
        log.warning("hooks.yaml: %s should be a list of commands", hook_point)
        return []
    return [hook for hook in map(Hook.parse, entries) if hook is not None]


def _run_one(hook: Hook, hook_point: str, stdin: str, cwd: Path) -> HookResult:
    try:
        proc = subprocess.run(
            hook.command,
            shell=True,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=hook.timeout,
            cwd=str(cwd),
        )
    except subprocess.TimeoutExpired:
        return HookResult(hook_point, hook.command, -1, error=f"Hook timed out after {hook.timeout}s")
    except OSError as e:
        return HookResult(hook_point, hook.command, -1, error=str(e))
    return HookResult(
        hook_point,
        hook.command,
        proc.returncode,
        stdout=proc.stdout[:OUTPUT_CAP],
        stderr=proc.stderr[:OUTPUT_CAP],
    )


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[HookResult]:
    """Run every hook registered for *hook_point*, in order.

    Failures are logged and reported in the results, never raised.
    """
    if root is None:
        root = workspace_root()
    hooks = hooks_for(hook_point, root)
    if not hooks:
        return []

    stdin = json.dumps(context, ensure_ascii=False)
    results = []
    for hook in hooks:
        result = _run_one(hook, hook_point, stdin, root)
        if not result.ok:
            log.warning("Hook %s (%s) failed: %s", hook_point, hook.command, result.summary())
        results.append(result)
    return results
