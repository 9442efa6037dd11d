"""Shared test fixtures for dayplan tests."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from dayplan.log import teardown_logging
from dayplan.planner import Planner
from dayplan.store import MemoryStore

FIXED_TODAY = date(2024, 2, 28)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a config.yaml."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    config = {
        "timezone": "UTC",
        "pomodoro": {"duration": 25, "break": 5},
        "habits": {"seed": ["Hydrate (8 glasses)", "10k steps / cardio", "Study DSA 30m"]},
        "tasks": {
            "categories": ["General", "Study", "Work", "Health", "Personal"],
            "default_category": "General",
        },
        "logging": {"level": "DEBUG"},
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    # Set env var
    os.environ["DAYPLAN_ROOT"] = str(root)
    yield root
    # Cleanup
    teardown_logging()
    if "DAYPLAN_ROOT" in os.environ:
        del os.environ["DAYPLAN_ROOT"]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def planner(store: MemoryStore) -> Planner:
    """An in-memory planner whose "today" is 2024-02-28."""
    return Planner(store, today=lambda: FIXED_TODAY)
