# src/todo_sync/tasks/task_store.py

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from .task_models import (
    AddTask,
    ClearCompleted,
    EditTask,
    RemoveTask,
    Task,
    TaskAction,
    ToggleTask,
    new_task,
)

logger = logging.getLogger(__name__)

StoreListener = Callable[[tuple[Task, ...]], None]


def _replace_one(
    tasks: tuple[Task, ...], task_id: int, update: Callable[[Task], Task]
) -> tuple[Task, ...]:
    for idx, task in enumerate(tasks):
        if task.id == task_id:
            return tasks[:idx] + (update(task),) + tasks[idx + 1 :]
    return tasks


def reduce_tasks(tasks: tuple[Task, ...], action: TaskAction) -> tuple[Task, ...]:
    """
    Apply one action to a collection and return the resulting collection.

    Pure. Untouched Task objects keep their identity, and a no-op returns
    `tasks` itself so callers can compare by identity.
    """
    if isinstance(action, AddTask):
        if any(t.id == action.task.id for t in tasks):
            return tasks
        return (action.task,) + tasks

    if isinstance(action, ToggleTask):
        return _replace_one(tasks, action.task_id, lambda t: replace(t, completed=not t.completed))

    if isinstance(action, EditTask):
        text = (action.text or "").strip()
        if not text:
            return tasks
        current = next((t for t in tasks if t.id == action.task_id), None)
        if current is None or current.text == text:
            return tasks
        return _replace_one(tasks, action.task_id, lambda t: replace(t, text=text))

    if isinstance(action, RemoveTask):
        kept = tuple(t for t in tasks if t.id != action.task_id)
        return tasks if len(kept) == len(tasks) else kept

    if isinstance(action, ClearCompleted):
        kept = tuple(t for t in tasks if not t.completed)
        return tasks if len(kept) == len(tasks) else kept

    raise TypeError(f"unknown task action: {action!r}")


class TaskStore:
    """
    In-memory canonical task collection.

    - the collection is an immutable tuple, most recent task first
    - every change swaps in a new tuple and bumps `version`
    - invalid input (blank text, unknown id) is a silent no-op
    """

    def __init__(self, tasks: tuple[Task, ...] = ()) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._version = 0
        self._listeners: list[StoreListener] = []
        logger.info("TaskStore ready total=%s", len(self._tasks))

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> tuple[Task, ...]:
        return self._tasks

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- mutations ----

    def dispatch(self, action: TaskAction) -> bool:
        """Apply an action; returns True if the collection changed."""
        updated = reduce_tasks(self._tasks, action)
        if updated is self._tasks:
            logger.debug("Task action was a no-op: %s", action)
            return False

        self._tasks = updated
        self._version += 1
        logger.debug("Task action applied: %s version=%s total=%s", action, self._version, len(updated))
        self._notify()
        return True

    def dispatch_many(self, actions: Iterable[TaskAction]) -> bool:
        """
        Apply several actions as one commit.

        Actions are folded first; the store swaps in the final collection
        once, with a single version bump and a single notification.
        """
        actions = list(actions)
        updated = functools.reduce(reduce_tasks, actions, self._tasks)
        if updated is self._tasks:
            logger.debug("Batch of %d task actions was a no-op", len(actions))
            return False

        self._tasks = updated
        self._version += 1
        logger.debug("Batch of %d task actions applied version=%s total=%s", len(actions), self._version, len(updated))
        self._notify()
        return True

    def add(self, text: str) -> Task | None:
        if not text or not text.strip():
            return None
        task = new_task(text)
        self.dispatch(AddTask(task))
        return task

    def toggle(self, task_id: int) -> None:
        self.dispatch(ToggleTask(task_id))

    def edit(self, task_id: int, text: str) -> None:
        self.dispatch(EditTask(task_id, text))

    def remove(self, task_id: int) -> None:
        self.dispatch(RemoveTask(task_id))

    def clear_completed(self) -> None:
        self.dispatch(ClearCompleted())

    def _notify(self) -> None:
        snapshot = self._tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("TaskStore listener failed")
