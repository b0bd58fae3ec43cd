"""Root pytest fixtures for work-batcher tests."""

from __future__ import annotations

import queue
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from work_batcher import ThreadScheduler, WorkBatcher


@pytest.fixture
def scheduler() -> Iterator[ThreadScheduler]:
    """Private scheduler per test, shut down afterwards."""
    sched = ThreadScheduler(max_workers=2, name="test-scheduler")
    yield sched
    sched.shutdown(wait=True)


@pytest.fixture
def batches() -> queue.Queue[list[Any]]:
    """Thread-safe sink collecting every batch handed to the processor."""
    return queue.Queue()


@pytest.fixture
def make_batcher(
    scheduler: ThreadScheduler,
    batches: queue.Queue[list[Any]],
) -> Iterator[Callable[..., WorkBatcher[Any]]]:
    """Factory for batchers that record their batches; drained after the test."""
    created: list[WorkBatcher[Any]] = []

    def factory(**options: Any) -> WorkBatcher[Any]:
        options.setdefault("processor", batches.put)
        options.setdefault("scheduler", scheduler)
        batcher: WorkBatcher[Any] = WorkBatcher(**options)
        created.append(batcher)
        return batcher

    yield factory

    for batcher in created:
        batcher.shutdown(timeout=5)
