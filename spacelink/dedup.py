"""Detection of packets received twice within a short window."""

from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Callable

from .clock import get_ms
from .crc32 import crc32_memory

_U32 = 0xFFFFFFFF


class Deduplicator:
    """Remembers the checksums of recent frames and flags repeats."""

    def __init__(self, count: int = 16, window_ms: int = 100,
                 clock: Callable[[], int] = get_ms) -> None:
        if count < 1:
            raise ValueError("count must be at least 1")
        self._count = count
        self._window_ms = window_ms
        self._clock = clock
        self._entries: deque[tuple[int, int]] = deque(
            [(0, 0)] * count, maxlen=count
        )

    def is_duplicate(self, frame: bytes) -> bool:
        """Return True if ``frame`` was seen within the window, else record it."""
        crc = crc32_memory(frame)
        now = self._clock()
        for seen_crc, stamp in islice(reversed(self._entries), self._count - 1):
            if now > (stamp + self._window_ms) & _U32:
                break
            if seen_crc == crc:
                return True
        self._entries.append((crc, now))
        return False