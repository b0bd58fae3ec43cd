"""错误体系：提供批处理引擎的结构化错误类型。

Error hierarchy for work-batcher.
"""

from work_batcher.errors.base import (
    ConfigurationError,
    ErrorContext,
    ProcessingError,
    SchedulerError,
    WorkBatcherError,
)

__all__ = [
    "ConfigurationError",
    "ErrorContext",
    "ProcessingError",
    "SchedulerError",
    "WorkBatcherError",
]
