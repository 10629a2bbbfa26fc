"""Tests for the settlement timer queue."""

import threading
from unittest.mock import Mock, patch

import pytest

from sigtrade_app.settlement.scheduler import SettlementScheduler


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock) -> SettlementScheduler:
    return SettlementScheduler(clock=clock)


class TestScheduling:
    """Queue ordering and due-time handling."""

    def test_schedule_sets_due_time(self, scheduler, clock):
        task = scheduler.schedule(2.5, lambda: None, name="t")

        assert task.due_at == pytest.approx(clock.now + 2.5)
        assert scheduler.pending_count == 1
        assert scheduler.next_due() == task.due_at

    def test_negative_delay_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.schedule(-1, lambda: None)

    def test_empty_queue(self, scheduler):
        assert scheduler.next_due() is None
        assert scheduler.run_due() == 0

    def test_run_due_only_runs_due_tasks(self, scheduler, clock):
        calls = []
        scheduler.schedule(1, lambda: calls.append("a"))
        scheduler.schedule(5, lambda: calls.append("b"))

        assert scheduler.run_due(clock.now + 0.5) == 0
        assert scheduler.run_due(clock.now + 1) == 1
        assert calls == ["a"]
        assert scheduler.pending_count == 1

    def test_tasks_run_in_due_order(self, scheduler, clock):
        calls = []
        scheduler.schedule(3, lambda: calls.append(3))
        scheduler.schedule(1, lambda: calls.append(1))
        scheduler.schedule(2, lambda: calls.append(2))

        clock.now += 10
        assert scheduler.run_due() == 3
        assert calls == [1, 2, 3]

    def test_equal_due_times_keep_insertion_order(self, scheduler, clock):
        calls = []
        for i in range(5):
            scheduler.schedule(1, lambda i=i: calls.append(i))

        scheduler.run_due(clock.now + 1)

        assert calls == [0, 1, 2, 3, 4]

    def test_failing_task_does_not_stop_others(self, scheduler, clock):
        calls = []

        def boom():
            raise RuntimeError("boom")

        scheduler.schedule(1, boom, name="bad")
        scheduler.schedule(1, lambda: calls.append("ok"), name="good")

        with patch.object(scheduler, "logger", Mock()) as mock_logger:
            assert scheduler.run_due(clock.now + 1) == 2

        assert calls == ["ok"]
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["task"] == "bad"
        assert mock_logger.error.call_args.kwargs["error_type"] == "RuntimeError"


class TestWorker:
    """Background worker thread."""

    def test_worker_runs_due_tasks(self):
        scheduler = SettlementScheduler()
        done = threading.Event()
        scheduler.start()
        try:
            scheduler.schedule(0.01, done.set, name="fire")
            assert done.wait(timeout=2.0)
        finally:
            scheduler.stop()

        assert scheduler.running is False
        assert scheduler.pending_count == 0

    def test_start_is_idempotent(self):
        scheduler = SettlementScheduler()
        scheduler.start()
        try:
            worker = scheduler._worker
            scheduler.start()
            assert scheduler._worker is worker
            assert scheduler.running is True
        finally:
            scheduler.stop()

    def test_stop_leaves_future_tasks_queued(self):
        scheduler = SettlementScheduler()
        scheduler.start()
        scheduler.schedule(60, lambda: None)
        scheduler.stop()

        assert scheduler.pending_count == 1

    def test_stop_without_start(self):
        scheduler = SettlementScheduler()

        scheduler.stop()

        assert scheduler.running is False
