"""批处理引擎：按数量或时间窗口合并工作项并批量处理。

work-batcher: size- and time-triggered batching of work items.

Accumulates opaque work items and hands them to a processing function in
batches, bounding both batch size and latency.
"""
from __future__ import annotations

from work_batcher.batch import BatcherConfig, BatcherStatus, ProcessingOutcome, WorkBatcher
from work_batcher.errors import (
    ConfigurationError,
    ProcessingError,
    SchedulerError,
    WorkBatcherError,
)
from work_batcher.scheduler import (
    DelayedTaskScheduler,
    ScheduledTask,
    TaskState,
    ThreadScheduler,
    default_scheduler,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "BatcherConfig",
    "BatcherStatus",
    "ProcessingOutcome",
    "WorkBatcher",
    # Errors
    "ConfigurationError",
    "ProcessingError",
    "SchedulerError",
    "WorkBatcherError",
    # Scheduling
    "DelayedTaskScheduler",
    "ScheduledTask",
    "TaskState",
    "ThreadScheduler",
    "default_scheduler",
    # Version
    "__version__",
]
