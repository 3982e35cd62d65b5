"""Debug counters, error codes and the configurable print sink."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, fields
from typing import Callable


class DebugErrno(enum.Enum):
    """Last internal error recorded by the stack."""

    CORRUPT_BUFFER = enum.auto()
    MTU_EXCEEDED = enum.auto()
    ALREADY_FREE = enum.auto()
    REFCOUNT = enum.auto()
    INVALID_RTABLE_ENTRY = enum.auto()
    UNSUPPORTED = enum.auto()
    INVALID_BINDPORT = enum.auto()
    PORT_ALREADY_IN_USE = enum.auto()
    ALREADY_CLOSED = enum.auto()
    INVALID_POINTER = enum.auto()
    CLOCK_SET_FAIL = enum.auto()


_COUNTER_LIMIT = 256


@dataclass
class DebugCounters:
    """Eight-bit wrapping event counters and the last recorded error."""

    buffer_out: int = 0
    conn_out: int = 0
    conn_ovf: int = 0
    conn_noroute: int = 0
    can_errno: int = 0
    eth_errno: int = 0
    inval_reply: int = 0
    rdp_print: int = 0
    packet_print: int = 0
    errno: DebugErrno | None = None

    def increment(self, name: str) -> int:
        """Increase counter ``name`` by one, wrapping at 256, and return it."""
        if name == "errno" or name not in {f.name for f in fields(self)}:
            raise KeyError(f"unknown debug counter: {name}")
        value = (getattr(self, name) + 1) % _COUNTER_LIMIT
        setattr(self, name, value)
        return value

    def reset(self) -> None:
        """Zero all counters and clear the error."""
        for f in fields(self):
            setattr(self, f.name, f.default)


def _stdout_print(message: str) -> None:
    sys.stdout.write(message)


_print_function: Callable[[str], None] = _stdout_print


def set_print_function(func: Callable[[str], None] | None) -> None:
    """Route debug output to ``func``; ``None`` restores standard output."""
    global _print_function
    _print_function = _stdout_print if func is None else func


def csp_print(message: str) -> None:
    """Emit ``message`` through the configured print function."""
    _print_function(message)