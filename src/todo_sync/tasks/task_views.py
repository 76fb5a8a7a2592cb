# src/todo_sync/tasks/task_views.py

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

from .task_models import FilterCriterion, Stats, Task

T = TypeVar("T")


def matches(task: Task, criterion: FilterCriterion) -> bool:
    if criterion == FilterCriterion.ACTIVE:
        return not task.completed
    if criterion == FilterCriterion.COMPLETED:
        return task.completed
    return True


def visible(tasks: tuple[Task, ...], criterion: FilterCriterion) -> tuple[Task, ...]:
    """Filtered view; canonical order is kept."""
    if criterion == FilterCriterion.ALL:
        return tuple(tasks)
    return tuple(t for t in tasks if matches(t, criterion))


def compute_stats(tasks: tuple[Task, ...]) -> Stats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    return Stats(total=total, active=total - completed, completed=completed)


class IdentityMemo(Generic[T]):
    """
    Single-entry cache keyed on the identity of a collection plus extra keys.

    Collections are immutable and replaced on every change, so `is` on the
    collection is enough to tell whether a cached value is still valid.
    """

    def __init__(self, compute: Callable[..., T]) -> None:
        self._compute = compute
        self._source: object = None
        self._extra: tuple[Hashable, ...] | None = None
        self._value: T | None = None
        self._filled = False

    def get(self, source: tuple[Task, ...], *extra: Hashable) -> T:
        if self._filled and source is self._source and extra == self._extra:
            return self._value  # type: ignore[return-value]
        value = self._compute(source, *extra)
        self.put(source, value, *extra)
        return value

    def put(self, source: tuple[Task, ...], value: T, *extra: Hashable) -> None:
        self._source = source
        self._extra = extra
        self._value = value
        self._filled = True

    def clear(self) -> None:
        self._source = None
        self._extra = None
        self._value = None
        self._filled = False
