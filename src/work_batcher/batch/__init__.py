"""
Batch processing module for work-batcher.

Provides the batch engine, its configuration and queue representations.
"""

from work_batcher.batch.batcher import BatcherStatus, WorkBatcher
from work_batcher.batch.config import BatcherConfig
from work_batcher.batch.outcome import ProcessingOutcome
from work_batcher.batch.queue import DedupQueue, ListQueue, WorkQueue, create_queue

__all__ = [
    "BatcherConfig",
    "BatcherStatus",
    "DedupQueue",
    "ListQueue",
    "ProcessingOutcome",
    "WorkBatcher",
    "WorkQueue",
    "create_queue",
]
