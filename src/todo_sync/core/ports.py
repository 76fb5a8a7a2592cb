# src/todo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front-end.

Connectors and commands depend on these Protocols instead of the concrete
engine. This keeps the presentation side swappable and makes testing easier.
"""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Protocol

from ..tasks.task_models import FilterCriterion, Stats, Task, ViewSnapshot


class TaskListPort(Protocol):
    """What presentation may call on the synchronization engine."""

    def get_visible_tasks(self) -> tuple[Task, ...]: ...
    def get_filter(self) -> FilterCriterion: ...
    def get_stats(self) -> Stats: ...
    def is_pending(self) -> bool: ...
    def get_task(self, task_id: int) -> Task | None: ...
    def snapshot(self) -> ViewSnapshot: ...

    def add_task(self, text: str) -> None: ...
    def toggle_task(self, task_id: int) -> None: ...
    def delete_task(self, task_id: int) -> None: ...
    def edit_task(self, task_id: int, text: str) -> None: ...
    def clear_completed(self) -> None: ...
    def set_filter(self, criterion: FilterCriterion | str) -> None: ...

    def batch(self) -> AbstractContextManager[Any]: ...
    def subscribe(self, listener: Callable[[ViewSnapshot], None]) -> Callable[[], None]: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...
