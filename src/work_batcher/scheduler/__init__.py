"""
Delayed-task scheduling for work-batcher.

Provides the scheduler interface the batch engine depends on and a
thread-based implementation. A shared instance is created at import time
and handed to engines that are not given their own scheduler.
"""

from work_batcher.scheduler.base import DelayedTaskScheduler, ScheduledTask, TaskState
from work_batcher.scheduler.thread import ThreadScheduler, ThreadTask

_DEFAULT_SCHEDULER = ThreadScheduler(name="work-batcher-default")


def default_scheduler() -> ThreadScheduler:
    """Get the process-wide scheduler shared by engines without their own."""
    return _DEFAULT_SCHEDULER


__all__ = [
    "DelayedTaskScheduler",
    "ScheduledTask",
    "TaskState",
    "ThreadScheduler",
    "ThreadTask",
    "default_scheduler",
]
