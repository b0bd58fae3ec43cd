"""
Batch engine that accumulates work items and processes them in batches.

Items are handed to the processor once the queue reaches the size limit
or the time limit elapses after the first item entered an empty batch,
whichever comes first.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from work_batcher.batch.config import BatcherConfig
from work_batcher.batch.outcome import ProcessingOutcome
from work_batcher.batch.queue import create_queue
from work_batcher.errors import ConfigurationError, ErrorContext
from work_batcher.scheduler import TaskState, default_scheduler
from work_batcher.telemetry import (
    LogContext,
    clear_log_context,
    get_logger,
    set_log_context,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType

    from work_batcher.scheduler import DelayedTaskScheduler, ScheduledTask

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass(frozen=True)
class BatcherStatus:
    """Point-in-time view of a batcher.

    Attributes:
        queue_count: Number of pending items
        processed_count: Items successfully processed since construction
        scheduled_processing_time: Epoch seconds at which the pending batch
            is expected to be processed (None if nothing is scheduled)
    """

    queue_count: int
    processed_count: int
    scheduled_processing_time: float | None = None

    @property
    def is_scheduled(self) -> bool:
        """Check if a processing run is pending."""
        return self.scheduled_processing_time is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting the schedule when there is none."""
        result: dict[str, Any] = {
            "queue_count": self.queue_count,
            "processed_count": self.processed_count,
        }
        if self.scheduled_processing_time is not None:
            result["scheduled_processing_time"] = self.scheduled_processing_time
        return result


class WorkBatcher(Generic[T]):
    """Accumulates work items and processes them in batches.

    All state lives behind one lock. The processing run holds that lock for
    the whole processor call, so producers block while a batch is processed.
    A batch whose processor raises stays queued and is merged with items
    added later.

    Example:
        >>> def send(batch):
        ...     client.bulk_index(batch)
        ...
        >>> batcher = WorkBatcher(send, size_limit=100, time_limit=2.0)
        >>> batcher.add({"id": 1})
        >>> batcher.add_multiple([{"id": 2}, {"id": 3}])
        >>> batcher.shutdown()
    """

    def __init__(
        self,
        processor: Callable[[list[T]], object] | None = None,
        config: BatcherConfig | None = None,
        *,
        scheduler: DelayedTaskScheduler | None = None,
        name: str = "work_batcher",
        **options: Any,
    ) -> None:
        """Initialize batcher.

        Args:
            processor: Called with each batch as a list
            config: Batcher configuration (defaults apply if None)
            scheduler: Where processing runs (the shared default if None)
            name: Label attached to log records
            **options: Overrides for individual ``BatcherConfig`` fields

        Raises:
            ConfigurationError: If the processor is missing or an option is invalid
        """
        if processor is None:
            raise ConfigurationError(
                "Option required: processor",
                ErrorContext(
                    source="config", hint="pass the callable that handles each batch"
                ),
                option="processor",
            )
        if not callable(processor):
            raise ConfigurationError(
                "Processor must be callable", option="processor", value=processor
            )

        self._config = (config or BatcherConfig.default()).merged(**options)
        self._processor = processor
        self._scheduler = scheduler or default_scheduler()
        self._name = name

        self._lock = threading.Lock()
        self._queue = create_queue(self._config.deduplicate, self._config.deduplicator)
        self._processed = 0
        self._scheduled_task: ScheduledTask | None = None
        self._scheduled_time: float | None = None
        self._last_outcome: ProcessingOutcome | None = None

    def add(self, item: T) -> None:
        """Add one work item.

        Args:
            item: Work item
        """
        self.add_multiple([item])

    def add_multiple(self, items: Iterable[T]) -> None:
        """Add work items in order. An empty iterable is a no-op.

        Args:
            items: Work items

        Raises:
            SchedulerError: If the scheduler no longer accepts tasks
                (the items stay queued)
        """
        items = list(items)
        if not items:
            return

        with self._lock:
            self._queue.extend(items)
            self._schedule_processing()

    def status(self) -> BatcherStatus:
        """Get a consistent snapshot of queue size, counter and schedule."""
        with self._lock:
            return BatcherStatus(
                queue_count=len(self._queue),
                processed_count=self._processed,
                scheduled_processing_time=self._scheduled_time,
            )

    def inspect_queue(self) -> list[T]:
        """Get the pending items in queue order."""
        with self._lock:
            return self._queue.snapshot()

    def shutdown(self, timeout: float | None = None) -> bool:
        """Process any pending batch now and wait for it to finish.

        Args:
            timeout: Maximum seconds to wait (None waits for the processor)

        Returns:
            True if nothing was pending or the run finished, False on timeout
        Raises:
            SchedulerError: If the pending task was cancelled and the
                scheduler no longer accepts a replacement
        """
        with self._lock:
            orphaned = self._scheduled_task is not None
            task = self._live_task()
            if task is not None:
                self._accelerate(task)
            elif orphaned and len(self._queue):
                task = self._start_task(0.0)

        if task is None:
            return True

        logger.debug("Draining pending batch", batcher=self._name)
        return task.await_completion(timeout)

    @property
    def config(self) -> BatcherConfig:
        """Get batcher configuration."""
        return self._config

    @property
    def name(self) -> str:
        """Get batcher name."""
        return self._name

    @property
    def last_outcome(self) -> ProcessingOutcome | None:
        """Get the outcome of the most recent processing run."""
        with self._lock:
            return self._last_outcome

    def __enter__(self) -> WorkBatcher[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def _schedule_processing(self) -> None:
        """Create or accelerate the processing task. Caller holds the lock."""
        size_reached = (
            self._config.size_limit is not None
            and len(self._queue) >= self._config.size_limit
        )

        task = self._live_task()
        if task is not None:
            # An existing deadline is only ever brought forward
            if size_reached:
                self._accelerate(task)
                logger.debug(
                    "Size limit reached; processing accelerated",
                    batcher=self._name,
                    queue_count=len(self._queue),
                )
            return

        self._start_task(0.0 if size_reached else self._config.time_limit)

    def _live_task(self) -> ScheduledTask | None:
        """Get the pending task, forgetting one that ended without running the body.

        The body clears the handle itself, so a finished handle means the task
        was cancelled from outside, e.g. by a scheduler shutdown.
        """
        task = self._scheduled_task
        if task is not None and task.done:
            self._scheduled_task = None
            self._scheduled_time = None
            return None
        return task

    def _start_task(self, delay: float) -> ScheduledTask:
        """Schedule the processing body. Caller holds the lock.

        Raises:
            SchedulerError: If the scheduler no longer accepts tasks
        """
        task = self._scheduler.schedule_after(delay, self._run_scheduled)
        self._scheduled_task = task
        self._scheduled_time = time.time() + delay
        logger.debug(
            "Processing scheduled",
            batcher=self._name,
            delay=delay,
            queue_count=len(self._queue),
        )
        return task

    def _accelerate(self, task: ScheduledTask) -> None:
        """Make the pending task fire now. Caller holds the lock."""
        if task.reschedule(0) or task.state is TaskState.RUNNING:
            self._scheduled_time = time.time()

    def _run_scheduled(self) -> None:
        """Processing task body, run on a scheduler thread."""
        with self._lock:
            set_log_context(
                LogContext(batcher=self._name, batch_id=uuid.uuid4().hex[:12])
            )
            try:
                self._last_outcome = self._process_queue()
            finally:
                self._scheduled_task = None
                self._scheduled_time = None
                clear_log_context()

    def _process_queue(self) -> ProcessingOutcome:
        batch = self._queue.snapshot()
        start = time.perf_counter()
        try:
            self._processor(batch)
        except Exception as e:
            outcome = ProcessingOutcome.failure(
                len(batch), (time.perf_counter() - start) * 1000, e
            )
            logger.exception(
                "Batch processing failed; items retained",
                batch_size=len(batch),
                error=str(e),
            )
            return outcome

        self._processed += len(batch)
        self._queue.clear()
        outcome = ProcessingOutcome.success(
            len(batch), (time.perf_counter() - start) * 1000
        )
        logger.info(
            "Batch processed",
            batch_size=outcome.batch_size,
            duration_ms=round(outcome.duration_ms, 3),
        )
        return outcome
