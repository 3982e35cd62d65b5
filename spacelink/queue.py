"""Bounded, thread-safe FIFO message queue with millisecond timeouts."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any

MAX_TIMEOUT = 0xFFFFFFFF
"""Timeout value meaning "wait forever"."""


class QueueFull(Exception):
    """Raised when an item cannot be inserted before the timeout expires."""


class QueueEmpty(Exception):
    """Raised when no item becomes available before the timeout expires."""


def _deadline(timeout: int | None) -> float | None:
    if timeout is None or timeout == MAX_TIMEOUT:
        return None
    if timeout < 0:
        raise ValueError("timeout must not be negative")
    return time.monotonic() + timeout / 1000.0


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return deadline - time.monotonic()


class MessageQueue:
    """Fixed-capacity FIFO shared between threads.

    Timeouts are given in milliseconds; ``MAX_TIMEOUT`` or ``None`` blocks
    until the operation can complete.
    """

    def __init__(self, length: int) -> None:
        if length < 1:
            raise ValueError("queue length must be at least 1")
        self._length = length
        self._items: deque[Any] = deque()
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)

    def enqueue(self, item: Any, timeout: int | None = MAX_TIMEOUT) -> None:
        """Append ``item``, waiting up to ``timeout`` ms for a free slot."""
        deadline = _deadline(timeout)
        with self._not_full:
            while len(self._items) >= self._length:
                remaining = _remaining(deadline)
                if remaining is not None and remaining <= 0:
                    raise QueueFull("queue is full")
                self._not_full.wait(remaining)
            self._items.append(item)
            self._not_empty.notify_all()

    def enqueue_isr(self, item: Any) -> None:
        """Append ``item`` without waiting."""
        self.enqueue(item, 0)

    def dequeue(self, timeout: int | None = MAX_TIMEOUT) -> Any:
        """Remove and return the oldest item, waiting up to ``timeout`` ms."""
        deadline = _deadline(timeout)
        with self._not_empty:
            while not self._items:
                remaining = _remaining(deadline)
                if remaining is not None and remaining <= 0:
                    raise QueueEmpty("queue is empty")
                self._not_empty.wait(remaining)
            item = self._items.popleft()
            self._not_full.notify_all()
            return item

    def dequeue_isr(self) -> Any:
        """Remove and return the oldest item without waiting."""
        return self.dequeue(0)

    def size(self) -> int:
        """Number of items waiting in the queue."""
        with self._lock:
            return len(self._items)

    def free(self) -> int:
        """Number of free slots left in the queue."""
        with self._lock:
            return self._length - len(self._items)

    def __len__(self) -> int:
        return self.size()