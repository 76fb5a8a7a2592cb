# src/todo_sync/tasks/task_engine.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator

from .task_models import (
    AddTask,
    ClearCompleted,
    EditTask,
    FilterCriterion,
    RemoveTask,
    Stats,
    Task,
    TaskAction,
    ToggleTask,
    ViewSnapshot,
    new_task,
)
from .task_overlay import OptimisticOverlay
from .task_scheduler import ViewScheduler
from .task_store import TaskStore
from .task_views import IdentityMemo, compute_stats

logger = logging.getLogger(__name__)

EngineListener = Callable[[ViewSnapshot], None]


class TaskListEngine:
    """
    Public surface consumed by presentation.

    Reads:    get_visible_tasks / get_filter / get_stats / is_pending / snapshot
    Mutates:  add_task / toggle_task / delete_task / edit_task / clear_completed
    Deferred: set_filter (see ViewScheduler)

    Mutations are synchronous and never raise for bad input. Additions go
    through the optimistic overlay first and are committed to the store in
    the same step; inside batch() every mutation stays in the overlay until
    the batch exits.
    """

    def __init__(
        self,
        *,
        store: TaskStore | None = None,
        initial_filter: FilterCriterion = FilterCriterion.ALL,
        defer_filter: bool = True,
        chunk_size: int = 256,
    ) -> None:
        self.store = store if store is not None else TaskStore()
        self._overlay = OptimisticOverlay()
        self._overlay.begin(self.store.snapshot())
        self._batch_depth = 0

        self._listeners: list[EngineListener] = []
        self._notify_queued = False
        self._stats: IdentityMemo[Stats] = IdentityMemo(compute_stats)
        # Direct store mutations reach engine listeners too.
        self._unsubscribe_store = self.store.subscribe(self._on_store_change)

        self.scheduler = ViewScheduler(
            self._collection,
            initial_filter=initial_filter,
            chunk_size=chunk_size,
            defer=defer_filter,
            on_commit=self._on_filter_commit,
        )
        logger.info(
            "TaskListEngine ready filter=%s defer=%s chunk=%s",
            initial_filter,
            defer_filter,
            chunk_size,
        )

    # ---- reads ----

    def _collection(self) -> tuple[Task, ...]:
        """Overlay-inclusive, unfiltered collection."""
        return self._overlay.view(self.store.snapshot())

    def get_visible_tasks(self) -> tuple[Task, ...]:
        return self.scheduler.visible_tasks()

    def get_filter(self) -> FilterCriterion:
        return self.scheduler.filter

    def get_stats(self) -> Stats:
        return self._stats.get(self._collection())

    def is_pending(self) -> bool:
        return self.scheduler.pending

    def get_task(self, task_id: int) -> Task | None:
        return next((t for t in self._collection() if t.id == task_id), None)

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            tasks=self.get_visible_tasks(),
            filter=self.get_filter(),
            stats=self.get_stats(),
            pending=self.is_pending(),
        )

    # ---- mutations ----

    def add_task(self, text: str) -> None:
        if not text or not text.strip():
            logger.debug("add_task ignored: blank text")
            return

        task = new_task(text)
        self._overlay.begin(self.store.snapshot())
        self._overlay.push(AddTask(task))

        if self._batch_depth:
            self._changed()
            return
        self._commit_pending()

    def toggle_task(self, task_id: int) -> None:
        self._apply(ToggleTask(task_id))

    def edit_task(self, task_id: int, text: str) -> None:
        if not text or not text.strip():
            logger.debug("edit_task ignored: blank text id=%s", task_id)
            return
        self._apply(EditTask(task_id, text))

    def delete_task(self, task_id: int) -> None:
        self._apply(RemoveTask(task_id))

    def clear_completed(self) -> None:
        self._apply(ClearCompleted())

    def set_filter(self, criterion: FilterCriterion | str) -> None:
        parsed = criterion if isinstance(criterion, FilterCriterion) else FilterCriterion.parse(criterion)
        if parsed is None:
            logger.debug("set_filter ignored: unknown criterion %r", criterion)
            return
        self.scheduler.set_filter(parsed)
        self._changed()

    @contextlib.contextmanager
    def batch(self) -> Iterator[None]:
        """
        Group mutations: visible at once through the overlay, committed to
        the store together on exit of the outermost batch.

        If a block raises, the actions pushed inside that block are dropped,
        even when an enclosing batch catches the error and carries on.
        """
        mark = len(self._overlay.pending_actions)
        self._batch_depth += 1
        try:
            yield
        except BaseException:
            self._batch_depth -= 1
            self._overlay.truncate(mark)
            self._changed()
            raise
        else:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._overlay.is_active:
                self._commit_pending()

    def _apply(self, action: TaskAction) -> None:
        if self._batch_depth:
            self._overlay.begin(self.store.snapshot())
            self._overlay.push(action)
            self._changed()
            return

        if self.store.dispatch(action):
            self._overlay.settle(self.store.snapshot())

    def _commit_pending(self) -> None:
        actions = self._overlay.pending_actions
        try:
            self.store.dispatch_many(actions)
        except Exception:
            logger.exception("Commit of %d pending actions failed; discarding overlay", len(actions))
            self._overlay.discard()
            self._changed()
            raise

        if not self._overlay.settle(self.store.snapshot()):
            logger.warning("Overlay did not converge with canonical state; discarding")
            self._overlay.discard()
        self._changed()

    # ---- notifications ----

    def subscribe(self, listener: EngineListener) -> Callable[[], None]:
        """Call `listener(snapshot)` after changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        if self._notify_queued or not self._listeners:
            return
        self._notify_queued = True
        self.scheduler.submit_urgent(self._notify, "notify")

    def _notify(self) -> None:
        self._notify_queued = False
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Engine listener failed")

    def _on_store_change(self, _tasks: tuple[Task, ...]) -> None:
        self._changed()

    def _on_filter_commit(self, criterion: FilterCriterion) -> None:
        self._changed()

    # ---- lifecycle ----

    def flush(self) -> None:
        """Run all queued work (notifications and deferred recomputation)."""
        self.scheduler.flush()

    def close(self) -> None:
        self._unsubscribe_store()
        self.scheduler.close()
        self._listeners.clear()
        self._notify_queued = False
