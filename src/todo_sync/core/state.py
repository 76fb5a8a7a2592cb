# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskListPort


@dataclass
class AppState:
    # Settings are kept on the state so commands can read them.
    settings: object
    engine: TaskListPort
