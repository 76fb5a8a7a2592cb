# src/todo_sync/tasks/task_models.py

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from enum import StrEnum

# Process-wide id source: ids never repeat while the interpreter lives.
_ids = itertools.count(1)


class FilterCriterion(StrEnum):
    """Which subset of the collection is shown."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> FilterCriterion | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    text: str
    completed: bool = False
    created_at: float = 0.0


def next_task_id() -> int:
    return next(_ids)


def new_task(text: str, *, now: float | None = None) -> Task:
    """
    Build a fresh Task with a new id.

    Raises ValueError on blank text; the store and engine check first and
    treat blank input as a no-op.
    """
    clean = (text or "").strip()
    if not clean:
        raise ValueError("text is required")
    return Task(
        id=next_task_id(),
        text=clean,
        completed=False,
        created_at=time.time() if now is None else float(now),
    )


# ---- actions (shared by the canonical store and the optimistic overlay) ----


@dataclass(slots=True, frozen=True)
class AddTask:
    task: Task


@dataclass(slots=True, frozen=True)
class ToggleTask:
    task_id: int


@dataclass(slots=True, frozen=True)
class EditTask:
    task_id: int
    text: str


@dataclass(slots=True, frozen=True)
class RemoveTask:
    task_id: int


@dataclass(slots=True, frozen=True)
class ClearCompleted:
    pass


TaskAction = AddTask | ToggleTask | EditTask | RemoveTask | ClearCompleted


@dataclass(slots=True, frozen=True)
class Stats:
    total: int = 0
    active: int = 0
    completed: int = 0


@dataclass(slots=True, frozen=True)
class ViewSnapshot:
    """
    Everything presentation needs for one render.

    - tasks: the visible (filtered) sequence
    - filter: the requested criterion (may be ahead of `tasks` while pending)
    - stats: totals over the unfiltered collection
    - pending: a deferred filter recomputation is still outstanding
    """

    tasks: tuple[Task, ...]
    filter: FilterCriterion
    stats: Stats
    pending: bool
