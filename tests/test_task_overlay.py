# tests/test_task_overlay.py

from __future__ import annotations

from todo_sync.tasks.task_models import AddTask, EditTask, ToggleTask
from todo_sync.tasks.task_overlay import OptimisticOverlay, project, replay
from todo_sync.tasks.task_store import TaskStore

from .fakes import make_task, texts


def test_project_prepends_without_touching_base() -> None:
    a = make_task("a")
    base = (a,)
    pending = make_task("b")

    out = project(base, pending)

    assert out == (pending, a)
    assert base == (a,)


def test_view_without_pending_is_base_itself() -> None:
    base = (make_task("a"),)
    overlay = OptimisticOverlay()
    overlay.begin(base)

    assert overlay.view(base) is base
    assert overlay.is_active is False


def test_overlay_converges_with_store() -> None:
    store = TaskStore((make_task("a"),))
    overlay = OptimisticOverlay()
    overlay.begin(store.snapshot())

    b = make_task("b")
    actions = [AddTask(b), ToggleTask(b.id), EditTask(b.id, " b2 ")]
    for action in actions:
        overlay.push(action)

    projected = overlay.view()
    assert texts(projected) == ["b2", "a"]
    assert projected[0].completed is True
    assert store.count_tasks() == 1

    for action in actions:
        store.dispatch(action)

    assert store.snapshot() == projected
    assert overlay.settle(store.snapshot()) is True
    assert overlay.is_active is False
    assert overlay.view(store.snapshot()) is store.snapshot()


def test_settle_refuses_until_canonical_catches_up() -> None:
    a = make_task("a")
    store = TaskStore((a,))
    overlay = OptimisticOverlay()
    overlay.begin(store.snapshot())
    overlay.push(ToggleTask(a.id))

    # Not committed yet: the toggle must stay pending, not be replayed twice.
    assert overlay.settle(store.snapshot()) is False
    assert overlay.pending_actions == (ToggleTask(a.id),)

    store.toggle(a.id)
    assert overlay.settle(store.snapshot()) is True


def test_discard_drops_pending() -> None:
    base = (make_task("a"),)
    overlay = OptimisticOverlay()
    overlay.begin(base)
    overlay.push(AddTask(make_task("b")))

    overlay.discard()

    assert overlay.is_active is False
    assert overlay.view(base) is base


def test_replay_matches_sequential_dispatch() -> None:
    a, b = make_task("a"), make_task("b", completed=True)
    base = (a, b)
    store = TaskStore(base)
    actions = [ToggleTask(a.id), EditTask(b.id, "bee")]

    for action in actions:
        store.dispatch(action)

    assert replay(base, actions) == store.snapshot()


def test_truncate_keeps_actions_before_mark() -> None:
    a = make_task("a")
    base = (a,)
    overlay = OptimisticOverlay()
    overlay.begin(base)
    first = AddTask(make_task("b"))
    overlay.push(first)
    mark = len(overlay.pending_actions)
    overlay.push(ToggleTask(a.id))
    overlay.push(AddTask(make_task("c")))
    assert texts(overlay.view()) == ["c", "b", "a"]

    overlay.truncate(mark)

    assert overlay.pending_actions == (first,)
    assert texts(overlay.view()) == ["b", "a"]
    assert overlay.view()[1] is a

    overlay.truncate(5)
    assert overlay.pending_actions == (first,)

    overlay.truncate(0)
    assert overlay.is_active is False
    assert overlay.view(base) is base
