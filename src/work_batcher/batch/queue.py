"""
Work queue representations.

The plain queue keeps every item in insertion order. The deduplicating
queue keeps the latest item per key, ordered by each key's first insertion.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

T = TypeVar("T")


def identity_key(item: Any) -> Any:
    """Default deduplication key: the item itself."""
    return item


class WorkQueue(ABC, Generic[T]):
    """Pending items of the batch in progress."""

    @abstractmethod
    def extend(self, items: Iterable[T]) -> None:
        """Insert items in order."""

    @abstractmethod
    def snapshot(self) -> list[T]:
        """Get a copy of the pending items in queue order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all pending items."""

    @abstractmethod
    def __len__(self) -> int: ...


class ListQueue(WorkQueue[T]):
    """Insertion-ordered queue that keeps duplicates."""

    def __init__(self) -> None:
        self._items: list[T] = []

    def extend(self, items: Iterable[T]) -> None:
        self._items.extend(items)

    def snapshot(self) -> list[T]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class DedupQueue(WorkQueue[T]):
    """Queue holding the latest item per deduplication key.

    Overwriting a key replaces its value in place; the key keeps the
    position of its first insertion.
    """

    def __init__(self, key_fn: Callable[[T], Hashable] | None = None) -> None:
        self._key_fn = key_fn or identity_key
        self._items: dict[Hashable, T] = {}

    def extend(self, items: Iterable[T]) -> None:
        """Upsert items by key. Nothing is inserted if any key fails.

        Raises:
            TypeError: If a key is unhashable
        """
        keyed = [(self._key_fn(item), item) for item in items]
        for key, _ in keyed:
            hash(key)
        for key, item in keyed:
            self._items[key] = item

    def snapshot(self) -> list[T]:
        return list(self._items.values())

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


def create_queue(
    deduplicate: bool,
    deduplicator: Callable[[T], Hashable] | None = None,
) -> WorkQueue[T]:
    """Create the queue representation for the given mode."""
    if deduplicate:
        return DedupQueue(deduplicator)
    return ListQueue()
