"""
Delayed-task scheduling interface.

A scheduler runs a callable on a separate thread after a delay and hands
back a task handle whose fire time can be moved before it runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class TaskState(str, Enum):
    """Lifecycle states of a scheduled task."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if the task can no longer change state."""
        return self in (TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELLED)


class ScheduledTask(ABC):
    """Handle to a callable scheduled for delayed execution."""

    @property
    @abstractmethod
    def state(self) -> TaskState:
        """Get current task state."""

    @property
    def done(self) -> bool:
        """Check if the task finished, failed or was cancelled."""
        return self.state.is_terminal

    @abstractmethod
    def reschedule(self, delay: float) -> bool:
        """Move the fire time to ``delay`` seconds from now.

        Args:
            delay: New delay in seconds (negative values are treated as 0)

        Returns:
            True if the task was still pending and has been moved,
            False if it already started or finished
        """

    @abstractmethod
    def cancel(self) -> bool:
        """Cancel the task if it has not started.

        Returns:
            True if the task was pending and is now cancelled
        """

    @abstractmethod
    def await_completion(self, timeout: float | None = None) -> bool:
        """Block until the task reaches a terminal state.

        Args:
            timeout: Maximum seconds to wait (None waits forever)

        Returns:
            True if the task is done, False if the timeout elapsed first
        """


class DelayedTaskScheduler(ABC):
    """Capability to run callables after a delay on another thread.

    Example:
        >>> task = scheduler.schedule_after(5.0, flush)
        >>> task.reschedule(0)  # fire as soon as possible
        >>> task.await_completion()
    """

    @abstractmethod
    def schedule_after(self, delay: float, fn: Callable[[], object]) -> ScheduledTask:
        """Schedule ``fn`` to run after ``delay`` seconds.

        Raises:
            SchedulerError: If the scheduler has been shut down
        """

    @abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and cancel the ones still pending.

        Args:
            wait: Wait for running tasks to finish
        """
