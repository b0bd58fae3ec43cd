"""
Result of a single processing run.
"""

from __future__ import annotations

from dataclasses import dataclass

from work_batcher.errors import ProcessingError


@dataclass(frozen=True)
class ProcessingOutcome:
    """Result of handing one batch to the processor.

    Attributes:
        batch_size: Number of items passed to the processor
        duration_ms: Time spent in the processor in milliseconds
        error: Failure raised by the processor (None on success)
    """

    batch_size: int
    duration_ms: float = 0.0
    error: ProcessingError | None = None

    @property
    def succeeded(self) -> bool:
        """Check if the processor returned normally."""
        return self.error is None

    @classmethod
    def success(cls, batch_size: int, duration_ms: float) -> ProcessingOutcome:
        """Create a successful outcome."""
        return cls(batch_size=batch_size, duration_ms=duration_ms)

    @classmethod
    def failure(
        cls,
        batch_size: int,
        duration_ms: float,
        cause: Exception,
    ) -> ProcessingOutcome:
        """Create a failed outcome wrapping the processor's exception."""
        error = ProcessingError(
            f"Processor failed: {cause}",
            batch_size=batch_size,
            cause=cause,
        )
        return cls(batch_size=batch_size, duration_ms=duration_ms, error=error)
