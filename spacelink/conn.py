"""Connection pool: allocation, lookup, receive queues and closing."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator

from .buffer import BufferPool, Packet, PacketId
from .clock import get_ms
from .debug import DebugCounters, DebugErrno, csp_print
from .queue import MAX_TIMEOUT, MessageQueue, QueueEmpty, QueueFull

PORT_SIZE_BITS = 6
DEFAULT_PORT_MAX_BIND = 16

FLAG_CRC32 = 0x01
FLAG_RDP = 0x02
FLAG_HMAC = 0x08
FLAG_FRAG = 0x10

O_NONE = 0x0000
O_RDP = 0x0001
O_NORDP = 0x0002
O_HMAC = 0x0004
O_NOHMAC = 0x0008
O_CRC32 = 0x0040
O_NOCRC32 = 0x0080

CLOSED_BY_USERSPACE = 0x01
CLOSED_BY_PROTOCOL = 0x02
CLOSED_BY_TIMEOUT = 0x04
CLOSED_BY_ALL = CLOSED_BY_USERSPACE | CLOSED_BY_PROTOCOL | CLOSED_BY_TIMEOUT

_TABLE_STR_ROWS = 10


class ConnState(enum.IntEnum):
    """Whether a connection slot is in use."""

    CLOSED = 0
    OPEN = 1


class ConnType(enum.IntEnum):
    """Who opened the connection."""

    CLIENT = 0
    SERVER = 1


class ConnectError(RuntimeError):
    """Raised when an outgoing connection cannot be opened."""


@dataclass(eq=False)
class Connection:
    """One slot of the connection pool."""

    sport_outgoing: int
    rx_queue: MessageQueue
    type: ConnType = ConnType.CLIENT
    state: ConnState = ConnState.CLOSED
    idin: PacketId = field(default_factory=PacketId)
    idout: PacketId = field(default_factory=PacketId)
    callback: Callable[[Packet], None] | None = None
    dest_socket: Any = None
    timestamp: int = 0
    opts: int = 0

    def dport(self) -> int:
        """Destination port of incoming packets."""
        return self.idin.dport

    def sport(self) -> int:
        """Source port of incoming packets."""
        return self.idin.sport

    def dst(self) -> int:
        """Destination address of incoming packets."""
        return self.idin.dst

    def src(self) -> int:
        """Source address of incoming packets."""
        return self.idin.src

    def flags(self) -> int:
        """Header flags of incoming packets."""
        return self.idin.flags


class ConnectionTable:
    """A fixed pool of connections, each with its own receive queue."""

    def __init__(self, max_connections: int = 8, rx_queue_length: int = 16,
                 port_max_bind: int = DEFAULT_PORT_MAX_BIND,
                 buffers: BufferPool | None = None,
                 counters: DebugCounters | None = None,
                 default_options: int = O_NONE) -> None:
        if max_connections < 1:
            raise ValueError("at least one connection is required")
        outgoing_ports = ((1 << PORT_SIZE_BITS) - 1) - port_max_bind
        if max_connections > outgoing_ports:
            raise ValueError("more connections than available outgoing ports")
        self.buffers = buffers
        if counters is None:
            counters = buffers.counters if buffers is not None else DebugCounters()
        self.counters = counters
        self.default_options = default_options
        self._lock = threading.Lock()
        self._last_given = 0
        self._conns = [
            Connection(port_max_bind + 1 + index, MessageQueue(rx_queue_length))
            for index in range(max_connections)
        ]

    def __iter__(self) -> Iterator[Connection]:
        return iter(self._conns)

    def __len__(self) -> int:
        return len(self._conns)

    def allocate(self, conn_type: ConnType) -> Connection | None:
        """Claim a closed slot, searching round-robin; None if all are open."""
        count = len(self._conns)
        found = None
        with self._lock:
            for step in range(1, count + 1):
                index = (self._last_given + step) % count
                candidate = self._conns[index]
                if candidate.state is ConnState.CLOSED:
                    candidate.state = ConnState.OPEN
                    self._last_given = index
                    found = candidate
                    break
        if found is None:
            self.counters.increment("conn_out")
            return None
        found.timestamp = 0
        found.type = ConnType(conn_type)
        found.idin.flags = 0
        found.idout.flags = 0
        return found

    def new(self, idin: PacketId, idout: PacketId,
            conn_type: ConnType) -> Connection | None:
        """Allocate a connection carrying copies of the given identifiers."""
        conn = self.allocate(conn_type)
        if conn is not None:
            conn.idin = replace(idin)
            conn.idout = replace(idout)
            conn.timestamp = get_ms()
            self._flush_rx_queue(conn)
        return conn

    def find_existing(self, packet_id: PacketId) -> Connection | None:
        """Return the open connection an incoming packet belongs to."""
        for conn in self._conns:
            if conn.state is not ConnState.OPEN:
                continue
            if conn.idin.dport != packet_id.dport:
                continue
            # Outgoing connections are identified by their unique source port
            # alone, so replies to broadcasts are accepted too.
            if conn.type is not ConnType.CLIENT and (
                conn.idin.sport != packet_id.sport or conn.idin.src != packet_id.src
            ):
                continue
            return conn
        return None

    def find_dport(self, dport: int) -> Connection | None:
        """Return the open client connection listening on ``dport``."""
        return next(
            (conn for conn in self._conns
             if conn.idin.dport == dport
             and conn.state is ConnState.OPEN
             and conn.type is ConnType.CLIENT),
            None,
        )

    def enqueue_packet(self, conn: Connection | None, packet: Packet) -> None:
        """Queue ``packet`` on ``conn``; QueueFull if its queue has no room."""
        if conn is None:
            raise ValueError("no connection given")
        try:
            conn.rx_queue.enqueue_isr(packet)
        except QueueFull:
            self.counters.increment("conn_ovf")
            raise

    def _flush_rx_queue(self, conn: Connection) -> None:
        while True:
            try:
                packet = conn.rx_queue.dequeue_isr()
            except QueueEmpty:
                return
            if packet is not None and self.buffers is not None:
                self.buffers.free(packet)

    def close(self, conn: Connection | None) -> None:
        """Close ``conn``, releasing every packet still queued on it."""
        if conn is None:
            return
        if conn.state is ConnState.CLOSED:
            self.counters.errno = DebugErrno.ALREADY_CLOSED
            return
        self._flush_rx_queue(conn)
        conn.state = ConnState.CLOSED

    def connect(self, prio: int, dest: int, dport: int,
                timeout: int = MAX_TIMEOUT, opts: int = O_NONE) -> Connection:
        """Open an outgoing connection to ``dest``:``dport``."""
        opts |= self.default_options

        # Destination 0 on the incoming side accepts replies addressed to
        # whichever interface the packet leaves from.
        incoming = PacketId(pri=prio, src=dest, dst=0, sport=dport)
        outgoing = PacketId(pri=prio, src=0, dst=dest, dport=dport)

        if opts & O_NOCRC32:
            opts &= ~O_CRC32
        if opts & O_RDP:
            self.counters.errno = DebugErrno.UNSUPPORTED
            raise ConnectError("reliable transport is not supported")
        if opts & O_HMAC:
            incoming.flags |= FLAG_HMAC
            outgoing.flags |= FLAG_HMAC
        if opts & O_CRC32:
            incoming.flags |= FLAG_CRC32
            outgoing.flags |= FLAG_CRC32

        conn = self.new(incoming, outgoing, ConnType.CLIENT)
        if conn is None:
            raise ConnectError("no free connections")

        conn.idout.sport = conn.sport_outgoing
        conn.idin.dport = conn.sport_outgoing
        conn.dest_socket = None
        conn.opts = opts
        return conn

    @staticmethod
    def _row(index: int, conn: Connection) -> str:
        return (f"[{index:02d} {id(conn):#x}] S:{int(conn.state)}, "
                f"{conn.idin.src} -> {conn.idin.dst}, "
                f"{conn.idin.dport} -> {conn.idin.sport} ({conn.sport_outgoing})")

    def print_table(self) -> None:
        """Print one line per connection slot."""
        for index, conn in enumerate(self._conns):
            csp_print(f"{self._row(index, conn)} fl {conn.idin.flags:x}\r\n")

    def table_str(self, size: int) -> str:
        """Return up to the last ten rows of the table, at most ``size`` characters."""
        start = max(0, len(self._conns) - _TABLE_STR_ROWS)
        parts = []
        remaining = size
        for index, conn in enumerate(self._conns[start:], start):
            line = self._row(index, conn) + "\n"
            parts.append(line[:max(remaining, 0)])
            remaining -= len(line)
            if remaining <= 0:
                break
        return "".join(parts)