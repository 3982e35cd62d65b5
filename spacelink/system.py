"""System hooks: free memory and process listing."""

from __future__ import annotations

from typing import Any

import psutil

_U32 = 0xFFFFFFFF


def memfree_hook() -> int:
    """Return free RAM in bytes, truncated to 32 bits."""
    return int(psutil.virtual_memory().free) & _U32


def ps_hook(packet: Any) -> int:
    """Return the number of listing bytes written to ``packet``.

    No process listing is provided, so nothing is written and 0 is returned.
    A missing packet is an error.
    """
    if packet is None:
        raise ValueError("ps_hook needs a packet")
    written = 0
    return written