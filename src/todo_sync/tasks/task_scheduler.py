# src/todo_sync/tasks/task_scheduler.py

from __future__ import annotations

"""
View scheduler.

A small cooperative job queue that:
- owns the requested filter criterion,
- runs urgent jobs (listener notifications) before deferred ones,
- recomputes the filtered view as deferred, chunked work,
- commits only a complete result for the latest requested criterion.

Nothing here runs in parallel. "Deferred" means lower priority in the queue:
a recomputation yields after every chunk and goes to the back of the
deferred line, so urgent work submitted in between runs first.
"""

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from enum import IntEnum

from .task_models import FilterCriterion, Task
from .task_views import IdentityMemo, matches, visible

logger = logging.getLogger(__name__)

TaskSource = Callable[[], tuple[Task, ...]]
CommitListener = Callable[[FilterCriterion], None]


class Priority(IntEnum):
    URGENT = 0
    DEFERRED = 1


@dataclass(slots=True, order=True)
class _Job:
    priority: int
    seq: int
    label: str = field(compare=False)
    run: Callable[[], bool] = field(compare=False)
    generation: int | None = field(default=None, compare=False)


def _call_once(fn: Callable[[], None]) -> Callable[[], bool]:
    def run() -> bool:
        fn()
        return True

    return run


def _advance(steps: Generator[None, None, None]) -> Callable[[], bool]:
    def run() -> bool:
        try:
            next(steps)
        except StopIteration:
            return True
        return False

    return run


class ViewScheduler:
    """
    Owns the filter and the memoized visible sequence.

    - filter: requested criterion, updated as soon as set_filter is called
    - committed_filter: criterion the visible sequence was last computed for
    - pending: a recomputation for the latest request is still outstanding
    """

    def __init__(
        self,
        source: TaskSource,
        *,
        initial_filter: FilterCriterion = FilterCriterion.ALL,
        chunk_size: int = 256,
        defer: bool = True,
        on_commit: CommitListener | None = None,
    ) -> None:
        self._source = source
        self._chunk_size = max(1, int(chunk_size))
        self._defer = bool(defer)
        self._on_commit = on_commit

        self._filter = initial_filter
        self._committed = initial_filter
        self._generation = 0
        self._inflight: int | None = None
        self._closed = False

        self._queue: list[_Job] = []
        self._seq = itertools.count()
        self._memo: IdentityMemo[tuple[Task, ...]] = IdentityMemo(visible)

    # ---- state ----

    @property
    def filter(self) -> FilterCriterion:
        return self._filter

    @property
    def committed_filter(self) -> FilterCriterion:
        return self._committed

    @property
    def pending(self) -> bool:
        return not self._closed and self._inflight is not None and self._inflight == self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def has_work(self) -> bool:
        return bool(self._queue)

    def visible_tasks(self) -> tuple[Task, ...]:
        """Visible sequence for the committed criterion over the current collection."""
        return self._memo.get(self._source(), self._committed)

    # ---- submission ----

    def _push(self, priority: Priority, label: str, run: Callable[[], bool], generation: int | None = None) -> None:
        heapq.heappush(self._queue, _Job(int(priority), next(self._seq), label, run, generation))

    def submit_urgent(self, fn: Callable[[], None], label: str = "urgent") -> None:
        if self._closed:
            logger.debug("Scheduler closed; dropping urgent job %s", label)
            return
        self._push(Priority.URGENT, label, _call_once(fn))

    def set_filter(self, criterion: FilterCriterion) -> None:
        """
        Request a new filter criterion.

        The criterion itself changes now; the visible sequence follows once
        the deferred recomputation commits.
        """
        if self._closed:
            logger.debug("Scheduler closed; ignoring set_filter(%s)", criterion)
            return

        if criterion == self._filter and (self.pending or criterion == self._committed):
            return

        self._filter = criterion
        self._generation += 1
        generation = self._generation

        if criterion == self._committed:
            # Back to what is already on screen: outstanding work is stale.
            self._inflight = None
            logger.debug("Filter reverted to committed %s (gen=%s)", criterion, generation)
            return

        self._inflight = generation
        self._push(
            Priority.DEFERRED,
            f"recompute:{criterion.value}",
            _advance(self._recompute(generation, criterion)),
            generation,
        )
        logger.debug("Filter requested %s (gen=%s)", criterion, generation)

        if not self._defer:
            self.flush()

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    def _recompute(self, generation: int, criterion: FilterCriterion) -> Generator[None, None, None]:
        while True:
            source = self._source()
            acc: list[Task] = []
            for start in range(0, len(source), self._chunk_size):
                if self._is_stale(generation):
                    logger.debug("Recompute gen=%s superseded; dropped", generation)
                    return
                acc.extend(t for t in source[start : start + self._chunk_size] if matches(t, criterion))
                yield

            if self._is_stale(generation):
                logger.debug("Recompute gen=%s superseded; dropped", generation)
                return
            if self._source() is not source:
                logger.debug("Collection changed during recompute gen=%s; restarting", generation)
                continue
            break

        self._memo.put(source, tuple(acc), criterion)
        self._committed = criterion
        self._inflight = None
        logger.info("Filter committed: %s (%d visible)", criterion, len(acc))

        if self._on_commit is not None:
            try:
                self._on_commit(criterion)
            except Exception:
                logger.exception("on_commit listener failed filter=%s", criterion)

    # ---- execution ----

    def run_once(self) -> bool:
        """Run one job step. Returns False if the queue was empty."""
        if not self._queue:
            return False

        job = heapq.heappop(self._queue)
        try:
            finished = job.run()
        except Exception:
            logger.exception("Scheduled job failed label=%s", job.label)
            if job.generation is not None and job.generation == self._inflight:
                self._inflight = None
            return True

        if not finished and not self._closed:
            # Back of the line: anything urgent submitted meanwhile goes first.
            self._push(Priority(job.priority), job.label, job.run, job.generation)
        return True

    def run_pending(self, max_steps: int | None = None) -> int:
        steps = 0
        while max_steps is None or steps < max_steps:
            if not self.run_once():
                break
            steps += 1
        return steps

    def flush(self) -> None:
        self.run_pending()

    def close(self) -> None:
        """
        Abandon all outstanding work.

        Nothing partial is committed; the last committed view stays as is.
        """
        if self._closed:
            return
        dropped = len(self._queue)
        self._queue.clear()
        self._inflight = None
        self._closed = True
        logger.info("ViewScheduler closed (dropped %d jobs)", dropped)


async def run_view_scheduler(scheduler: ViewScheduler, *, idle_seconds: float = 0.01) -> None:
    """
    Drive a ViewScheduler from an asyncio event loop.

    One job step per loop turn, yielding to the loop in between so other
    coroutines (input handlers) interleave with deferred work. Sleeps
    idle_seconds when the queue is empty.

    To stop the driver, cancel the coroutine/task.
    """
    sleep_s = max(0.001, float(idle_seconds))

    while not scheduler.closed:
        try:
            ran = scheduler.run_once()
        except Exception:
            logger.exception("view scheduler step failed")
            ran = False

        await asyncio.sleep(0 if ran else sleep_s)
