# tests/test_presenter.py

from __future__ import annotations

import asyncio

import pytest

from planit.tasks.presenter import (
    CompletionPhase,
    CompletionTracker,
    build_rows,
    refresh_interval,
    toggle_completion,
)
from planit.tasks.task_models import Task
from planit.tasks.urgency import NO_DEADLINE, Tier

from .conftest import NOW, sample_tasks
from .fakes import FakeTaskBridge, api_error


def test_rows_keep_fetch_order_and_number_from_one() -> None:
    tasks = sample_tasks()
    rows = build_rows(tasks, CompletionTracker(tasks), NOW)

    assert [r.task_id for r in rows] == ["t1", "t2", "t3"]
    assert [r.index for r in rows] == [1, 2, 3]


def test_row_countdowns_and_objective() -> None:
    tasks = sample_tasks()
    rows = build_rows(tasks, CompletionTracker(tasks), NOW)
    by_id = {r.task_id: r for r in rows}

    assert by_id["t1"].urgency.display == "11h"
    assert by_id["t1"].date_label == "Oct 24"
    assert not by_id["t1"].highlighted
    assert not by_id["t1"].has_objective

    t2 = by_id["t2"]
    assert t2.urgency.tier == Tier.URGENT
    assert t2.urgency.display == "1:30:00"
    assert t2.highlighted
    assert t2.objective_name == "Finances"
    assert t2.objective_urgency.display == "7d"
    assert t2.objective_date_label == "Oct 31"


def test_completed_rows_stop_counting_down() -> None:
    tasks = sample_tasks()
    rows = build_rows(tasks, CompletionTracker(tasks), NOW)
    done = rows[2]

    assert done.complete
    assert done.urgency == NO_DEADLINE
    assert done.objective_urgency == NO_DEADLINE
    assert not done.highlighted


def test_translated_overdue_label() -> None:
    tasks = [Task(id="late", title="Late", do_date="2024-10-20")]
    rows = build_rows(tasks, CompletionTracker(tasks), NOW, {"task.overdue": "Vencida"}.get)
    assert rows[0].urgency.tier == Tier.OVERDUE
    assert rows[0].urgency.display == "Vencida"


def test_refresh_interval_follows_urgent_open_rows() -> None:
    tasks = sample_tasks()
    tracker = CompletionTracker(tasks)

    assert refresh_interval(build_rows(tasks, tracker, NOW)) == 1.0

    # Completing the only urgent task drops back to the slow tick.
    tracker.begin("t2")
    tracker.commit("t2")
    assert refresh_interval(build_rows(tasks, tracker, NOW)) == 60.0


def test_refresh_interval_custom_values() -> None:
    assert refresh_interval([], urgent_seconds=0.5, idle_seconds=30.0) == 30.0


def test_tracker_two_phase_transition() -> None:
    tasks = [Task(id="a", title="A")]
    tracker = CompletionTracker(tasks)

    pending = tracker.begin("a")
    assert pending is not None
    assert pending.phase == CompletionPhase.PENDING
    assert pending.value is True
    assert tracker.is_complete("a")
    assert tracker.is_pending("a")

    committed = tracker.commit("a")
    assert committed.phase == CompletionPhase.COMMITTED
    assert committed.value is True
    assert not tracker.is_pending("a")


def test_tracker_rollback_restores_previous_value() -> None:
    tasks = [Task(id="a", title="A")]
    tracker = CompletionTracker(tasks)

    tracker.begin("a")
    rolled = tracker.rollback("a", error="nope")

    assert rolled.phase == CompletionPhase.ROLLED_BACK
    assert rolled.value is False
    assert rolled.error == "nope"
    assert not tracker.is_complete("a")


def test_tracker_ignores_second_begin_while_pending() -> None:
    tracker = CompletionTracker([Task(id="a", title="A")])
    assert tracker.begin("a") is not None
    assert tracker.begin("a") is None
    assert tracker.is_complete("a")


def test_tracker_reset_reseeds_from_fetch() -> None:
    tracker = CompletionTracker([Task(id="a", title="A")])
    tracker.begin("a")
    tracker.reset([Task(id="b", title="B")])

    assert not tracker.is_pending("a")
    assert not tracker.is_complete("a")
    assert not tracker.is_complete("b")


@pytest.mark.asyncio
async def test_toggle_completion_commits_on_success() -> None:
    tasks = [Task(id="a", title="A")]
    tracker = CompletionTracker(tasks)
    bridge = FakeTaskBridge()

    result = await toggle_completion(tracker, bridge, "tok", "a")

    assert result is not None
    assert result.phase == CompletionPhase.COMMITTED
    assert bridge.complete_calls == [("tok", "a", True)]
    assert tracker.is_complete("a")


@pytest.mark.asyncio
async def test_toggle_completion_rolls_back_on_failure() -> None:
    tasks = [Task(id="a", title="A")]
    tracker = CompletionTracker(tasks)
    bridge = FakeTaskBridge(complete_error=api_error(500, "server down"))

    result = await toggle_completion(tracker, bridge, "tok", "a")

    assert result is not None
    assert result.phase == CompletionPhase.ROLLED_BACK
    assert result.value is False
    assert "server down" in (result.error or "")
    assert not tracker.is_complete("a")
    assert not tracker.is_pending("a")


@pytest.mark.asyncio
async def test_second_toggle_while_in_flight_is_ignored() -> None:
    tasks = [Task(id="a", title="A")]
    tracker = CompletionTracker(tasks)
    bridge = FakeTaskBridge(gate=asyncio.Event())

    first = asyncio.create_task(toggle_completion(tracker, bridge, "tok", "a"))
    await asyncio.sleep(0)

    assert tracker.is_pending("a")
    assert await toggle_completion(tracker, bridge, "tok", "a") is None

    bridge.gate.set()
    result = await first

    assert result is not None
    assert result.phase == CompletionPhase.COMMITTED
    assert len(bridge.complete_calls) == 1
