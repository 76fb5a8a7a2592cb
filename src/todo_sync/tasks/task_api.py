# src/todo_sync/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .task_models import Task, ViewSnapshot

logger = logging.getLogger(__name__)

STATUS_MARK = {True: "[x]", False: "[ ]"}


def resolve_task_ref(state: AppState, ref: str) -> Task | None:
    """
    Map a user-facing reference to a visible task.

    Accepts the 1-based position in the visible list ("3") or the task id
    prefixed with '#' ("#17"). Returns None when nothing matches.
    """
    raw = (ref or "").strip()
    if not raw:
        return None

    visible = state.engine.get_visible_tasks()

    if raw.startswith("#"):
        try:
            task_id = int(raw[1:])
        except ValueError:
            return None
        return state.engine.get_task(task_id)

    try:
        pos = int(raw)
    except ValueError:
        return None

    if pos < 1 or pos > len(visible):
        logger.debug("Task ref out of range ref=%s visible=%d", raw, len(visible))
        return None
    return visible[pos - 1]


def format_task_line(pos: int, task: Task) -> str:
    return f"{pos:>3}. {STATUS_MARK[task.completed]} {task.text}  (#{task.id})"


def format_snapshot(snap: ViewSnapshot) -> str:
    """Plain-text rendering of one view snapshot."""
    header = f"Filter: {snap.filter.value}"
    if snap.pending:
        header += " (updating...)"

    lines = [header]
    if not snap.tasks:
        lines.append("  (no tasks)")
    for pos, task in enumerate(snap.tasks, start=1):
        lines.append(format_task_line(pos, task))
    lines.append(format_stats(snap))
    return "\n".join(lines)


def format_stats(snap: ViewSnapshot) -> str:
    s = snap.stats
    return f"Total: {s.total}  Active: {s.active}  Completed: {s.completed}"
