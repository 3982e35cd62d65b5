"""Monotonic uptime counters and the wall clock."""

from __future__ import annotations

import time
from dataclasses import dataclass

_U32 = 0xFFFFFFFF
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000


class ClockError(OSError):
    """Raised when the wall clock cannot be set."""


@dataclass(frozen=True)
class Timestamp:
    """Wall-clock time as whole seconds plus nanoseconds."""

    tv_sec: int = 0
    tv_nsec: int = 0


def get_ms() -> int:
    """Milliseconds of monotonic uptime, wrapping at 32 bits."""
    return (time.monotonic_ns() // _NS_PER_MS) & _U32


def get_s() -> int:
    """Seconds of monotonic uptime, wrapping at 32 bits."""
    return (time.monotonic_ns() // _NS_PER_S) & _U32


def clock_get_time() -> Timestamp:
    """Return the current real-time clock."""
    seconds, nanoseconds = divmod(time.time_ns(), _NS_PER_S)
    return Timestamp(seconds, nanoseconds)


def clock_set_time(timestamp: Timestamp) -> None:
    """Set the real-time clock; raises ClockError if that is not possible."""
    setter = getattr(time, "clock_settime_ns", None)
    if setter is None:
        raise ClockError("setting the clock is not supported on this platform")
    clock_id = getattr(time, "CLOCK_REALTIME", 0)
    try:
        setter(clock_id, timestamp.tv_sec * _NS_PER_S + timestamp.tv_nsec)
    except (OSError, ValueError, OverflowError) as exc:
        raise ClockError(f"could not set clock: {exc}") from exc