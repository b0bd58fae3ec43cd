"""
Telemetry module for work-batcher.

Provides structured logging for the batch engine and scheduler.
"""

from work_batcher.telemetry.logger import (
    BatcherLogger,
    JsonFormatter,
    LogContext,
    LogLevel,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "BatcherLogger",
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
