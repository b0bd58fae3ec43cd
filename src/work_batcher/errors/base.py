"""错误基类：提供分层错误体系和结构化错误上下文。

Base error classes for work-batcher.

Provides a layered error hierarchy:
- WorkBatcherError: Base class for all library errors
- ConfigurationError: Invalid or missing construction options
- ProcessingError: Processor failures captured at the task boundary
- SchedulerError: Delayed-task scheduling failures
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    field_path: str | None = None
    """Path to the problematic option (e.g., 'time_limit')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'config', 'processor', 'scheduler')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class WorkBatcherError(Exception):
    """Base class for all work-batcher errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> WorkBatcherError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class ConfigurationError(WorkBatcherError):
    """Invalid batcher configuration.

    Raised when:
    - The required processor is missing or not callable
    - A size or time limit is not positive
    - The deduplicator is not callable
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        option: str | None = None,
        value: Any = None,
    ) -> None:
        ctx = context or ErrorContext(source="config")
        if option:
            ctx.field_path = option
        if value is not None:
            ctx.details["value"] = value
        super().__init__(message, ctx)
        self.option = option
        self.value = value


class ProcessingError(WorkBatcherError):
    """The processor failed for a batch.

    Never raised to producers; it is carried by a failed
    ``ProcessingOutcome`` and logged at the task boundary.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        batch_size: int = 0,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="processor")
        ctx.details["batch_size"] = batch_size
        if cause is not None:
            ctx.details["error_type"] = type(cause).__name__
        super().__init__(message, ctx)
        self.batch_size = batch_size
        self.__cause__ = cause


class SchedulerError(WorkBatcherError):
    """Error raised by a delayed-task scheduler.

    Raised when a task is scheduled after the scheduler has been shut down.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="scheduler")
        super().__init__(message, ctx)
