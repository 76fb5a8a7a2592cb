# tests/test_console_connector.py

from __future__ import annotations

from collections.abc import Iterator

import pytest

from todo_sync.connectors.console_connector import run_console
from todo_sync.tasks.task_models import FilterCriterion


def _feed(lines: list[str]):
    it: Iterator[str] = iter(lines)

    def read_line(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


@pytest.mark.asyncio
async def test_console_adds_commands_and_renders(state, capsys: pytest.CaptureFixture[str]) -> None:
    await run_console(
        state,
        read_line=_feed(["Buy milk", "", "/done 1", "/filter completed", "/nope"]),
        idle_seconds=0.001,
    )

    out = capsys.readouterr().out
    assert "Added: Buy milk" in out
    assert "Completed: Buy milk" in out
    assert "[VIEW] Switching to completed..." in out
    assert "Unknown command: /nope" in out
    assert "[x] Buy milk" in out

    engine = state.engine
    assert engine.get_filter() == FilterCriterion.COMPLETED
    assert engine.is_pending() is False
    assert [t.text for t in engine.get_visible_tasks()] == ["Buy milk"]


@pytest.mark.asyncio
async def test_console_exit_command_stops_loop(state) -> None:
    await run_console(state, read_line=_feed(["/exit", "never added"]))
    assert state.engine.get_stats().total == 0


@pytest.mark.asyncio
async def test_console_reports_crashing_command(state, monkeypatch, capsys) -> None:
    from todo_sync.cli import commands

    def boom(state, args):
        raise RuntimeError("boom")

    monkeypatch.setitem(commands.registry._handlers, "boom", boom)

    await run_console(state, read_line=_feed(["/boom"]))

    assert "Internal error while handling a command." in capsys.readouterr().out


@pytest.mark.asyncio
async def test_console_runs_view_driver_for_its_lifetime(state, monkeypatch) -> None:
    from todo_sync.connectors import console_connector

    seen: list[object] = []
    real_driver = console_connector.run_view_scheduler

    async def recording_driver(scheduler, *, idle_seconds: float = 0.01) -> None:
        seen.append(scheduler)
        await real_driver(scheduler, idle_seconds=idle_seconds)

    monkeypatch.setattr(console_connector, "run_view_scheduler", recording_driver)

    await run_console(state, read_line=_feed(["/filter active"]), idle_seconds=0.001)

    assert seen == [state.engine.scheduler]
    assert state.engine.get_filter() == FilterCriterion.ACTIVE
    assert state.engine.is_pending() is False
