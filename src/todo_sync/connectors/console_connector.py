# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import format_snapshot
from ..tasks.task_models import ViewSnapshot
from ..tasks.task_scheduler import run_view_scheduler

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _handle_line(state: AppState, user_input: str) -> str:
    try:
        cmd_response = command_registry.handle(state, user_input, emit=_print_ts)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if cmd_response is None:
        state.engine.add_task(user_input)
        return f"Added: {user_input}"
    return cmd_response


async def run_console(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    idle_seconds: float = 0.01,
) -> None:
    """
    Interactive front-end over the engine.

    Input lines are read off the event loop (asyncio.to_thread) and applied
    as urgent work. Deferred view work runs on the loop through
    run_view_scheduler while the prompt waits, and every published
    snapshot re-renders the board. Remaining work is drained on exit.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    engine = state.engine

    def on_change(snap: ViewSnapshot) -> None:
        print(format_snapshot(snap), flush=True)
        print()

    unsubscribe = engine.subscribe(on_change)
    driver = asyncio.create_task(run_view_scheduler(engine.scheduler, idle_seconds=idle_seconds))

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(read_line, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            _print_ts(_handle_line(state, user_input))
            # let the driver pick up the work this line queued
            await asyncio.sleep(0)

        engine.flush()
    finally:
        driver.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await driver
        unsubscribe()

    logger.info("Console connector finished.")
