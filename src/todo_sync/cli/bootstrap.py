# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the synchronization engine into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_engine import TaskListEngine
from ..tasks.task_models import FilterCriterion

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    initial = getattr(settings, "initial_filter", FilterCriterion.ALL)
    if not isinstance(initial, FilterCriterion):
        initial = FilterCriterion.parse(str(initial)) or FilterCriterion.ALL

    engine = TaskListEngine(
        initial_filter=initial,
        defer_filter=bool(getattr(settings, "defer_filter", True)),
        chunk_size=int(getattr(settings, "recompute_chunk_size", 256)),
    )
    return AppState(settings=settings, engine=engine)
