"""Bounded most-recent window over broadcast readings."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_CAPACITY = 50


class LiveBuffer(Generic[T]):
    """Keep the last ``capacity`` received items in arrival order.

    Each connected viewer owns one buffer; buffers are never shared, so no
    locking is done here.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("Live buffer capacity must be a positive integer.")
        self._capacity = capacity
        self._items: Deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def receive(self, item: T) -> None:
        """Append ``item``; the oldest entry is evicted once over capacity."""
        self._items.append(item)

    def contents(self) -> List[T]:
        """Return a copy of the window, most recent last."""
        return list(self._items)

    def latest(self) -> Optional[T]:
        if not self._items:
            return None
        return self._items[-1]

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.contents())

    def __repr__(self) -> str:
        return f"LiveBuffer(capacity={self._capacity}, size={len(self._items)})"

