"""
In-memory batch queue for pending events.
"""

import threading
from typing import Generic, List, TypeVar

T = TypeVar("T")


class BatchQueue(Generic[T]):
    """
    Ordered, append-only buffer that is drained as a whole.

    Appends and drains share one lock held only for the list operation,
    so every item ends up in exactly one drained batch.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self._items: List[T] = []

    def append(self, item: T) -> int:
        """
        Add an item to the tail of the queue.

        Args:
            item: Item to enqueue

        Returns:
            Queue size after the append
        """
        with self.lock:
            self._items.append(item)
            return len(self._items)

    def drain_all(self) -> List[T]:
        """
        Remove and return every queued item.

        Returns:
            Items in insertion order (empty list when nothing is queued)
        """
        with self.lock:
            items, self._items = self._items, []
        return items

    def size(self) -> int:
        """Number of queued items."""
        with self.lock:
            return len(self._items)

    def __len__(self) -> int:
        return self.size()
