# src/todo_sync/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import format_snapshot, format_stats, resolve_task_ref
from ..tasks.task_models import FilterCriterion

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other line adds a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    defer = "ON" if getattr(settings, "defer_filter", True) else "OFF"
    chunk = getattr(settings, "recompute_chunk_size", "?")
    pending = "yes" if state.engine.is_pending() else "no"
    return (
        "Status:\n"
        f"  Filter: {state.engine.get_filter().value}\n"
        f"  Deferred filtering: {defer} (chunk={chunk})\n"
        f"  Update pending: {pending}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_snapshot(state.engine.snapshot())


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(state.engine.snapshot())


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done N   -> toggle completion of visible task N
    """
    if not args:
        return "Usage: /done N"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    state.engine.toggle_task(task.id)
    return f"{'Reopened' if task.completed else 'Completed'}: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit N new text  -> replace the text of visible task N
    Blank text keeps the old text.
    """
    if len(args) < 2:
        return "Usage: /edit N new text"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    text = " ".join(args[1:]).strip()
    state.engine.edit_task(task.id, text)
    return f"Edited: {text}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm N"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    state.engine.delete_task(task.id)
    return f"Deleted: {task.text}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    before = state.engine.get_stats().completed
    state.engine.clear_completed()
    return f"Cleared {before} completed task(s)."


def cmd_filter(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /filter                      -> show the current filter
    /filter all|active|completed -> switch (applied as deferred work)
    """
    if not args:
        return f"Filter is {state.engine.get_filter().value}. Use /filter all|active|completed."

    criterion = FilterCriterion.parse(args[0])
    if criterion is None:
        return "Usage: /filter all|active|completed"

    state.engine.set_filter(criterion)
    if emit is not None and state.engine.is_pending():
        emit(f"[VIEW] Switching to {criterion.value}...")
    logger.debug("Filter change requested: %s", criterion)
    return f"Filter set to {criterion.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show engine settings and pending state.")
registry.register("list", cmd_list, help_text="Show the visible tasks.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show total/active/completed counts.")
registry.register("done", cmd_done, help_text="Toggle completion: /done N.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Edit text: /edit N new text.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm N.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("filter", cmd_filter, help_text="Filter: /filter all | active | completed.")
