"""
Timer queue for delayed settlement tasks.

Tasks sit in a heap ordered by due time. A single worker thread runs them
when due; tests can skip the thread and drive the queue with run_due().
"""

import heapq
import itertools
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A callback due at a point on the scheduler clock."""
    due_at: float
    seq: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)


class SettlementScheduler:
    """Heap-based timer queue with an optional background worker."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.logger = logger
        self._queue: list[ScheduledTask] = []
        self._counter = itertools.count()
        self._cond = threading.Condition()
        self._worker: Optional[threading.Thread] = None
        self._running = False

    def schedule(self, delay_seconds: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """
        Queue a callback to run after a delay.

        Args:
            delay_seconds: Non-negative delay from now
            callback: Zero-argument callable
            name: Label used in logs

        Returns:
            The queued task
        """
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")

        with self._cond:
            task = ScheduledTask(
                due_at=self.clock() + delay_seconds,
                seq=next(self._counter),
                name=name,
                callback=callback,
            )
            heapq.heappush(self._queue, task)
            self._cond.notify()

        self.logger.debug("Task scheduled", task=name, delay_seconds=delay_seconds)
        return task

    @property
    def pending_count(self) -> int:
        with self._cond:
            return len(self._queue)

    def next_due(self) -> Optional[float]:
        """Due time of the earliest task, None when empty."""
        with self._cond:
            return self._queue[0].due_at if self._queue else None

    def run_due(self, now: Optional[float] = None) -> int:
        """
        Run every task due at or before ``now``.

        Callbacks run outside the queue lock. A failing callback is logged and
        does not stop the remaining tasks.

        Returns:
            Number of tasks run
        """
        due = self._pop_due(self.clock() if now is None else now)
        for task in due:
            self._run_task(task)
        return len(due)

    def _pop_due(self, now: float) -> list[ScheduledTask]:
        due = []
        with self._cond:
            while self._queue and self._queue[0].due_at <= now:
                due.append(heapq.heappop(self._queue))
        return due

    def _run_task(self, task: ScheduledTask) -> None:
        try:
            task.callback()
        except Exception as e:
            self.logger.error(
                "Scheduled task failed",
                task=task.name,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )

    def start(self) -> None:
        """Start the background worker thread."""
        with self._cond:
            if self._running:
                return
            self._running = True
            self._worker = threading.Thread(
                target=self._run_loop, name="settlement-scheduler", daemon=True
            )
            self._worker.start()
        self.logger.info("Settlement scheduler started")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the worker. Tasks still queued are left in place."""
        with self._cond:
            if not self._running:
                return
            self._running = False
            self._cond.notify_all()
            worker = self._worker

        if worker is not None:
            worker.join(timeout)
        self.logger.info("Settlement scheduler stopped", pending=self.pending_count)

    @property
    def running(self) -> bool:
        return self._running

    def _run_loop(self) -> None:
        while True:
            with self._cond:
                while self._running:
                    if not self._queue:
                        self._cond.wait()
                        continue
                    wait_for = self._queue[0].due_at - self.clock()
                    if wait_for <= 0:
                        break
                    self._cond.wait(wait_for)
                if not self._running:
                    return

            self.run_due()
