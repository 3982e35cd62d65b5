"""Binary semaphore with millisecond timeouts."""

from __future__ import annotations

import threading
import time

from .queue import MAX_TIMEOUT


class BinarySemaphore:
    """Semaphore whose count never exceeds one; starts available."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._available = True

    def wait(self, timeout: int | None = MAX_TIMEOUT) -> bool:
        """Take the semaphore, waiting up to ``timeout`` ms.

        Returns True if taken, False if the timeout expired.
        """
        if timeout is None or timeout == MAX_TIMEOUT:
            deadline = None
        else:
            if timeout < 0:
                raise ValueError("timeout must not be negative")
            deadline = time.monotonic() + timeout / 1000.0
        with self._cond:
            while not self._available:
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._cond.wait(remaining)
            self._available = False
            return True

    def post(self) -> None:
        """Make the semaphore available; posting an available one is a no-op."""
        with self._cond:
            if not self._available:
                self._available = True
                self._cond.notify()