"""
Thread-based delayed-task scheduler.

A single timer thread keeps pending tasks ordered by fire time and hands
due tasks to a thread pool. Rescheduling pushes a fresh heap entry and
leaves the old one to be discarded when it surfaces.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from work_batcher.errors import ErrorContext, SchedulerError
from work_batcher.scheduler.base import DelayedTaskScheduler, ScheduledTask, TaskState
from work_batcher.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)

# Upper bound for a single timer wait in seconds
_MAX_WAIT = 3600.0


class ThreadTask(ScheduledTask):
    """Task handle owned by a ``ThreadScheduler``."""

    def __init__(
        self,
        scheduler: ThreadScheduler,
        fn: Callable[[], object],
        fire_at: float,
        seq: int,
    ) -> None:
        self._scheduler = scheduler
        self._fn = fn
        self._fire_at = fire_at
        self._seq = seq
        self._state = TaskState.PENDING
        self._finished = threading.Event()

    @property
    def state(self) -> TaskState:
        """Get current task state."""
        return self._state

    @property
    def fire_at(self) -> float:
        """Monotonic clock reading at which the task is due."""
        return self._fire_at

    @property
    def delay_remaining(self) -> float:
        """Seconds until the task is due (0 once due or started)."""
        if self._state is not TaskState.PENDING:
            return 0.0
        return max(0.0, self._fire_at - time.monotonic())

    def reschedule(self, delay: float) -> bool:
        return self._scheduler._reschedule(self, delay)

    def cancel(self) -> bool:
        return self._scheduler._cancel(self)

    def await_completion(self, timeout: float | None = None) -> bool:
        return self._finished.wait(timeout)

    def _run(self) -> None:
        """Invoke the callable on a pool thread."""
        try:
            self._fn()
        except Exception:
            logger.exception("Scheduled task raised", task_seq=self._seq)
            self._finish(TaskState.FAILED)
        else:
            self._finish(TaskState.COMPLETED)

    def _finish(self, state: TaskState) -> None:
        with self._scheduler._cond:
            self._state = state
        self._finished.set()


class ThreadScheduler(DelayedTaskScheduler):
    """Runs delayed tasks on a thread pool.

    The timer thread is started lazily on the first ``schedule_after`` call,
    so an idle scheduler costs no threads.

    Example:
        >>> scheduler = ThreadScheduler(max_workers=2)
        >>> task = scheduler.schedule_after(0.5, lambda: print("fired"))
        >>> task.await_completion()
        >>> scheduler.shutdown()
    """

    def __init__(self, max_workers: int = 4, name: str = "work-batcher") -> None:
        """Initialize scheduler.

        Args:
            max_workers: Maximum pool threads running tasks concurrently
            name: Prefix for thread names
        """
        self._name = name
        self._max_workers = max_workers
        self._cond = threading.Condition()
        self._heap: list[tuple[float, int, ThreadTask]] = []
        self._counter = itertools.count()
        self._pool: ThreadPoolExecutor | None = None
        self._timer: threading.Thread | None = None
        self._shutdown = False

    @property
    def is_running(self) -> bool:
        """Check if the scheduler still accepts tasks."""
        return not self._shutdown

    @property
    def pending_count(self) -> int:
        """Number of tasks waiting for their fire time."""
        with self._cond:
            return sum(
                1
                for _, seq, task in self._heap
                if task._seq == seq and task._state is TaskState.PENDING
            )

    def schedule_after(self, delay: float, fn: Callable[[], object]) -> ThreadTask:
        with self._cond:
            if self._shutdown:
                raise SchedulerError(
                    "Scheduler is shut down",
                    ErrorContext(
                        source="scheduler",
                        hint="create a new scheduler or keep the existing one running",
                    ),
                )
            self._ensure_started()
            seq = next(self._counter)
            task = ThreadTask(self, fn, time.monotonic() + max(0.0, delay), seq)
            heapq.heappush(self._heap, (task._fire_at, seq, task))
            self._cond.notify()
        return task

    def shutdown(self, wait: bool = True) -> None:
        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            for _, seq, task in self._heap:
                if task._seq == seq and task._state is TaskState.PENDING:
                    task._state = TaskState.CANCELLED
                    task._finished.set()
            self._heap.clear()
            self._cond.notify_all()
            timer, pool = self._timer, self._pool

        if timer is not None and wait and timer is not threading.current_thread():
            timer.join()
        if pool is not None:
            pool.shutdown(wait=wait)
        logger.debug("Scheduler shut down", scheduler=self._name)

    def _ensure_started(self) -> None:
        if self._timer is not None:
            return
        self._pool = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=f"{self._name}-worker",
        )
        self._timer = threading.Thread(
            target=self._run_timer,
            args=(self._pool,),
            name=f"{self._name}-timer",
            daemon=True,
        )
        self._timer.start()

    def _reschedule(self, task: ThreadTask, delay: float) -> bool:
        with self._cond:
            if task._state is not TaskState.PENDING:
                return False
            task._fire_at = time.monotonic() + max(0.0, delay)
            task._seq = next(self._counter)
            heapq.heappush(self._heap, (task._fire_at, task._seq, task))
            self._cond.notify()
            return True

    def _cancel(self, task: ThreadTask) -> bool:
        with self._cond:
            if task._state is not TaskState.PENDING:
                return False
            task._state = TaskState.CANCELLED
            self._cond.notify()
        task._finished.set()
        return True

    def _run_timer(self, pool: ThreadPoolExecutor) -> None:
        with self._cond:
            while not self._shutdown:
                if not self._heap:
                    self._cond.wait()
                    continue

                fire_at, seq, task = self._heap[0]
                if task._seq != seq or task._state is not TaskState.PENDING:
                    # Superseded by a reschedule, or cancelled
                    heapq.heappop(self._heap)
                    continue

                remaining = fire_at - time.monotonic()
                if remaining > 0:
                    # Long waits are sliced; Condition.wait overflows on huge timeouts
                    self._cond.wait(min(remaining, _MAX_WAIT))
                    continue

                heapq.heappop(self._heap)
                task._state = TaskState.RUNNING
                try:
                    pool.submit(task._run)
                except RuntimeError:
                    # Pool refuses work during interpreter shutdown
                    logger.error("Could not dispatch scheduled task", exc_info=True)
                    task._state = TaskState.FAILED
                    task._finished.set()
