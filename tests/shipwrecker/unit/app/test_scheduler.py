from __future__ import annotations

import pytest

from shipwrecker.app.scheduler import Scheduler


def test_scheduler_call_later_runs_when_due() -> None:
    scheduler = Scheduler()
    calls: list[str] = []
    scheduler.call_later(0.2, lambda: calls.append("once"))

    assert scheduler.advance(0.1) == 0
    assert calls == []
    assert scheduler.advance(0.1) == 1
    assert calls == ["once"]
    assert scheduler.advance(1.0) == 0


def test_scheduler_cancel_prevents_execution() -> None:
    scheduler = Scheduler()
    calls: list[str] = []
    task_id = scheduler.call_later(0.1, lambda: calls.append("never"))
    assert scheduler.is_pending(task_id)
    scheduler.cancel(task_id)
    assert not scheduler.is_pending(task_id)
    assert scheduler.advance(0.2) == 0
    assert calls == []


def test_scheduler_runs_tasks_in_due_order() -> None:
    scheduler = Scheduler()
    calls: list[int] = []
    scheduler.call_later(0.3, lambda: calls.append(3))
    scheduler.call_later(0.1, lambda: calls.append(1))
    scheduler.call_later(0.2, lambda: calls.append(2))
    assert scheduler.advance(0.5) == 3
    assert calls == [1, 2, 3]


def test_scheduler_validates_time_arguments() -> None:
    scheduler = Scheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-0.1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-0.1)


def test_scheduler_pending_count_tracks_active_tasks() -> None:
    scheduler = Scheduler()
    first = scheduler.call_later(1.0, lambda: None)
    scheduler.call_later(2.0, lambda: None)
    assert scheduler.pending_count == 2

    scheduler.cancel(first)
    assert scheduler.pending_count == 1

    scheduler.advance(2.0)
    assert scheduler.pending_count == 0


def test_scheduler_clock_accumulates_and_schedules_relative_to_now() -> None:
    scheduler = Scheduler()
    calls: list[float] = []
    scheduler.advance(1.5)
    assert scheduler.now_seconds == 1.5

    scheduler.call_later(1.0, lambda: calls.append(scheduler.now_seconds))
    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(0.5) == 1
    assert calls == [2.5]
