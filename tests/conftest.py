# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_sync.cli.bootstrap import create_initial_state
from todo_sync.core.state import AppState
from todo_sync.tasks.task_engine import TaskListEngine
from todo_sync.tasks.task_models import FilterCriterion


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the engine.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment. A tiny chunk size makes
    every filter recomputation span several scheduler steps.
    """
    return SimpleNamespace(
        app_name="todo-sync-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        console_enabled=True,
        defer_filter=True,
        recompute_chunk_size=2,
        initial_filter=FilterCriterion.ALL,
    )


@pytest.fixture()
def engine(settings: SimpleNamespace) -> TaskListEngine:
    return TaskListEngine(
        initial_filter=settings.initial_filter,
        defer_filter=settings.defer_filter,
        chunk_size=settings.recompute_chunk_size,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)
