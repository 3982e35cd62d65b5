"""Fixed pool of reference-counted packet buffers."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .debug import DebugCounters, DebugErrno
from .queue import MessageQueue, QueueEmpty


@dataclass
class PacketId:
    """Packet header fields."""

    pri: int = 0
    flags: int = 0
    src: int = 0
    dst: int = 0
    dport: int = 0
    sport: int = 0


@dataclass(eq=False)
class Packet:
    """A packet buffer: fixed-capacity data area plus header and length."""

    data: bytearray
    length: int = 0
    id: PacketId = field(default_factory=PacketId)
    _pool: BufferPool | None = field(default=None, init=False, repr=False)
    _refcount: int = field(default=0, init=False, repr=False)

    def set_data(self, data: bytes) -> None:
        """Copy ``data`` into the buffer; ValueError if it does not fit."""
        if len(data) > len(self.data):
            raise ValueError("data exceeds packet buffer size")
        self.data[: len(data)] = data
        self.length = len(data)

    def payload(self) -> bytes:
        """Return the first ``length`` bytes of the data area."""
        return bytes(self.data[: self.length])


class BufferPool:
    """A fixed number of packet buffers handed out and returned by refcount."""

    def __init__(self, count: int = 10, size: int = 256,
                 counters: DebugCounters | None = None) -> None:
        if count < 1:
            raise ValueError("buffer count must be at least 1")
        self.size = size
        self.counters = counters if counters is not None else DebugCounters()
        self._lock = threading.Lock()
        self._free = MessageQueue(count)
        for _ in range(count):
            packet = Packet(bytearray(size))
            packet._pool = self
            self._free.enqueue_isr(packet)

    def get(self, size: int = 0) -> Packet | None:
        """Take a free buffer, or return None when the pool is exhausted."""
        try:
            packet = self._free.dequeue_isr()
        except QueueEmpty:
            self.counters.increment("buffer_out")
            return None
        with self._lock:
            packet._refcount = 1
        return packet

    def free(self, packet: Packet | None) -> None:
        """Drop one reference; the buffer returns to the pool at zero."""
        if packet is None:
            return
        if packet._pool is not self:
            self.counters.errno = DebugErrno.CORRUPT_BUFFER
            return
        with self._lock:
            if packet._refcount == 0:
                self.counters.errno = DebugErrno.ALREADY_FREE
                return
            packet._refcount -= 1
            if packet._refcount > 0:
                self.counters.errno = DebugErrno.REFCOUNT
                return
        self._free.enqueue_isr(packet)

    def clone(self, packet: Packet | None) -> Packet | None:
        """Return a new buffer holding a copy of ``packet``, or None."""
        if packet is None:
            return None
        copy = self.get(packet.length)
        if copy is not None:
            length = min(packet.length, len(copy.data))
            copy.data[:length] = packet.data[:length]
            copy.length = packet.length
            copy.id = PacketId(**vars(packet.id))
        return copy

    def ref_inc(self, packet: Packet | None) -> None:
        """Add a reference to ``packet``."""
        if packet is None:
            self.counters.errno = DebugErrno.INVALID_POINTER
            return
        if packet._pool is not self:
            self.counters.errno = DebugErrno.CORRUPT_BUFFER
            return
        with self._lock:
            packet._refcount += 1

    def remaining(self) -> int:
        """Number of free buffers in the pool."""
        return self._free.size()