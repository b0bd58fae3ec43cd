#!/usr/bin/env python3
"""
Basic batching example.

This example demonstrates:
- Size-triggered and time-triggered processing
- Deduplication by key
- Recovery after a processor failure
- Draining on shutdown

Usage:
    python examples/basic_batching.py
"""

import time

from work_batcher import BatcherConfig, ThreadScheduler, WorkBatcher
from work_batcher.telemetry import BatcherLogger, LogLevel


def size_and_time_triggers(scheduler: ThreadScheduler) -> None:
    """Process on whichever limit is reached first."""
    print("Size and time triggers...")

    def send(batch: list[int]) -> None:
        print(f"  sent {batch}")

    with WorkBatcher(send, scheduler=scheduler, size_limit=3, time_limit=0.5) as batcher:
        batcher.add_multiple([1, 2, 3])  # size limit: sent immediately
        time.sleep(0.1)
        batcher.add(4)  # sent after 0.5s
        print(f"  status: {batcher.status().to_dict()}")
        time.sleep(0.7)
    print()


def deduplication(scheduler: ThreadScheduler) -> None:
    """Keep only the latest update per record id."""
    print("Deduplication...")

    config = BatcherConfig(deduplicate=True, deduplicator=lambda update: update["id"])
    batcher = WorkBatcher(print, config, scheduler=scheduler, time_limit=10)
    batcher.add({"id": 1, "name": "draft"})
    batcher.add({"id": 2, "name": "other"})
    batcher.add({"id": 1, "name": "final"})
    print(f"  pending: {batcher.inspect_queue()}")
    batcher.shutdown()
    print()


def failure_recovery(scheduler: ThreadScheduler) -> None:
    """A failed batch is kept and merged with later items."""
    print("Failure recovery...")
    attempts = [0]

    def flaky(batch: list[str]) -> None:
        attempts[0] += 1
        if attempts[0] == 1:
            raise ConnectionError("downstream unavailable")
        print(f"  sent {batch}")

    batcher = WorkBatcher(flaky, scheduler=scheduler, time_limit=0.1)
    batcher.add("a")
    time.sleep(0.3)
    print(f"  after failure: {batcher.status().to_dict()}")
    batcher.add("b")
    batcher.shutdown()
    print(f"  after retry: {batcher.status().to_dict()}")


def main() -> None:
    """Run all examples."""
    BatcherLogger.configure(level=LogLevel.WARNING)
    scheduler = ThreadScheduler(max_workers=2, name="example")
    try:
        size_and_time_triggers(scheduler)
        deduplication(scheduler)
        failure_recovery(scheduler)
    finally:
        scheduler.shutdown()


if __name__ == "__main__":
    main()
