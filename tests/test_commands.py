# tests/test_commands.py

from __future__ import annotations

from todo_sync.cli.commands import CommandRegistry, registry
from todo_sync.tasks.task_api import resolve_task_ref
from todo_sync.tasks.task_models import FilterCriterion

from .fakes import texts


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_resolve_task_ref_by_position_and_id(state) -> None:
    state.engine.add_task("a")
    state.engine.add_task("b")
    b, a = state.engine.get_visible_tasks()

    assert resolve_task_ref(state, "1") == b
    assert resolve_task_ref(state, "2") == a
    assert resolve_task_ref(state, f"#{a.id}") == a
    assert resolve_task_ref(state, "3") is None
    assert resolve_task_ref(state, "0") is None
    assert resolve_task_ref(state, "x") is None
    assert resolve_task_ref(state, "#x") is None


def test_done_edit_rm_clear(state) -> None:
    engine = state.engine
    engine.add_task("first")
    engine.add_task("second")

    assert registry.handle(state, "/done 1") == "Completed: second"
    assert engine.get_stats().completed == 1

    assert registry.handle(state, "/edit 2 first, renamed") == "Edited: first, renamed"
    assert texts(engine.get_visible_tasks()) == ["second", "first, renamed"]

    assert registry.handle(state, "/clear") == "Cleared 1 completed task(s)."
    assert texts(engine.get_visible_tasks()) == ["first, renamed"]

    assert registry.handle(state, "/rm 1") == "Deleted: first, renamed"
    assert engine.get_visible_tasks() == ()

    assert registry.handle(state, "/rm 1") == "No task 1."
    assert registry.handle(state, "/done") == "Usage: /done N"


def test_filter_command_defers_until_flush(state) -> None:
    engine = state.engine
    engine.add_task("a")
    engine.add_task("b")
    registry.handle(state, "/done 1")
    notes: list[str] = []

    reply = registry.handle(state, "/filter active", emit=notes.append)

    assert reply == "Filter set to active."
    assert notes == ["[VIEW] Switching to active..."]
    assert engine.get_filter() == FilterCriterion.ACTIVE

    engine.flush()
    assert texts(engine.get_visible_tasks()) == ["a"]

    assert registry.handle(state, "/filter nope") == "Usage: /filter all|active|completed"
    assert "Filter is active" in (registry.handle(state, "/filter") or "")


def test_list_stats_status_help(state) -> None:
    state.engine.add_task("a")

    listing = registry.handle(state, "/list") or ""
    assert "Filter: all" in listing
    assert "[ ] a" in listing

    assert registry.handle(state, "/stats") == "Total: 1  Active: 1  Completed: 0"
    assert "Deferred filtering: ON (chunk=2)" in (registry.handle(state, "/status") or "")
    assert "/filter" in (registry.handle(state, "/help") or "")
