# src/todo_sync/tasks/task_overlay.py

from __future__ import annotations

"""
Optimistic overlay.

Not a second collection: a list of in-flight actions replayed over the
canonical base with the same reducer the store uses. When the canonical
collection catches up (equals the overlay's own projection) the base is
swapped and the action list cleared.
"""

import functools
import logging
from collections.abc import Iterable

from .task_models import AddTask, Task, TaskAction
from .task_store import reduce_tasks

logger = logging.getLogger(__name__)


def project(base: tuple[Task, ...], pending_add: Task) -> tuple[Task, ...]:
    """`base` with `pending_add` prepended. Does not touch `base`."""
    return (pending_add,) + tuple(base)


def replay(base: tuple[Task, ...], actions: Iterable[TaskAction]) -> tuple[Task, ...]:
    return functools.reduce(reduce_tasks, actions, tuple(base))


class OptimisticOverlay:
    """
    Pending actions over a borrowed canonical base.

    Lifecycle:
    - begin(base)  -> remember the canonical base the actions apply to
    - push(action) -> record an in-flight action
    - view()       -> replay(base, pending), visible immediately
    - settle(new)  -> once the canonical collection equals view(), clear
    """

    def __init__(self) -> None:
        self._base: tuple[Task, ...] = ()
        self._pending: list[TaskAction] = []
        self._projected: tuple[Task, ...] | None = None

    @property
    def pending_actions(self) -> tuple[TaskAction, ...]:
        return tuple(self._pending)

    @property
    def is_active(self) -> bool:
        return bool(self._pending)

    def begin(self, base: tuple[Task, ...]) -> None:
        if self._pending:
            return
        self._base = base
        self._projected = None

    def push(self, action: TaskAction) -> None:
        self._pending.append(action)
        self._projected = None
        logger.debug("Overlay push: %s (pending=%d)", action, len(self._pending))

    def view(self, base: tuple[Task, ...] | None = None) -> tuple[Task, ...]:
        """
        Overlay-inclusive collection.

        With no pending actions this is `base` itself (identity preserved).
        """
        if not self._pending:
            return self._base if base is None else base
        if self._projected is None:
            only = self._pending[0] if len(self._pending) == 1 else None
            if isinstance(only, AddTask):
                self._projected = project(self._base, only.task)
            else:
                self._projected = replay(self._base, self._pending)
        return self._projected

    def settle(self, canonical: tuple[Task, ...]) -> bool:
        """
        Swap in `canonical` as the new base if it reflects every pending action.

        Returns True when the overlay is empty afterwards.
        """
        if not self._pending:
            self._base = canonical
            return True

        if self.view() != canonical:
            return False

        logger.debug("Overlay settled (%d actions)", len(self._pending))
        self._pending.clear()
        self._base = canonical
        self._projected = None
        return True

    def truncate(self, mark: int) -> None:
        """Drop pending actions pushed after `mark` (a previous len(pending_actions))."""
        mark = max(0, mark)
        if mark >= len(self._pending):
            return
        logger.debug("Overlay truncated %d -> %d actions", len(self._pending), mark)
        del self._pending[mark:]
        self._projected = None

    def discard(self) -> None:
        if self._pending:
            logger.debug("Overlay discarded (%d actions)", len(self._pending))
        self._pending.clear()
        self._projected = None
