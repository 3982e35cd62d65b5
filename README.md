# spacelink

Building blocks of a small-satellite packet protocol stack, written in plain
Python:

- `spacelink.crc32`: CRC-32C (Castagnoli) checksums (`Crc32`,
  `crc32_memory`), and `append_crc32` / `verify_crc32`, which add a big-endian
  checksum trailer to a packet and check and strip it again.
- `spacelink.sha1`: an incremental SHA-1 hasher (`Sha1`, `sha1_memory`).
- `spacelink.hmac`: HMAC-SHA1 (`Hmac`, `hmac_memory`) and
  `HmacAuthenticator`, which derives a 16-byte key with SHA-1 and appends or
  verifies a 4-byte truncated HMAC trailer.
- `spacelink.queue`: `MessageQueue`, a bounded, thread-safe FIFO with
  millisecond timeouts (`MAX_TIMEOUT` or `None` waits forever).
- `spacelink.semaphore`: `BinarySemaphore`, whose `wait` returns `True` when
  taken and `False` on timeout.
- `spacelink.clock`: `get_ms` and `get_s` (monotonic uptime, wrapping at 32
  bits), `clock_get_time` returning a `Timestamp`, and `clock_set_time`, which
  raises `ClockError` when the clock cannot be set.
- `spacelink.buffer`: `BufferPool`, a fixed pool of reference-counted
  `Packet` buffers, each with a `PacketId` header.
- `spacelink.dedup`: `Deduplicator`, which flags frames whose checksum was
  seen within a short window (16 entries and 100 ms by default).
- `spacelink.conn`: `ConnectionTable`, a fixed pool of `Connection` slots with
  round-robin allocation, outgoing `connect`, lookup of the connection an
  incoming packet belongs to, per-connection receive queues and `close`.
- `spacelink.tasks`: `start_task` runs a routine in a daemon thread;
  `run_forever` calls a work function until it raises.
- `spacelink.system`: `memfree_hook` (free RAM via psutil) and `ps_hook`.
- `spacelink.debug`: `DebugCounters` (8-bit wrapping counters and the last
  `DebugErrno`), and `csp_print` with a replaceable sink set by
  `set_print_function`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Checksums:

```python
from spacelink.crc32 import append_crc32, crc32_memory, verify_crc32

checksum = crc32_memory(b"123456789")
framed = append_crc32(b"payload", max_length=256)
assert verify_crc32(framed) == b"payload"
```

A message queue:

```python
from spacelink.queue import MessageQueue, QueueEmpty

queue = MessageQueue(3)
queue.enqueue(1, timeout=0)
queue.enqueue(2, timeout=200)
assert queue.dequeue(timeout=0) == 1
assert len(queue) == 1
```

Authenticating packets with a shared key:

```python
from spacelink.hmac import HmacAuthenticator

auth = HmacAuthenticator(b"secret")
signed = auth.append(b"payload", max_length=256)
assert auth.verify(signed) == b"payload"
```

A buffer pool and a connection table:

```python
from spacelink.buffer import BufferPool
from spacelink.conn import ConnectionTable

pool = BufferPool(count=10, size=256)
table = ConnectionTable(buffers=pool)

conn = table.connect(prio=2, dest=1, dport=10, timeout=1000)
packet = pool.get(100)
packet.set_data(b"Hello world A\x00")
table.enqueue_packet(conn, packet)
table.close(conn)          # queued packets go back to the pool
assert pool.remaining() == 10
```

Errors are raised as exceptions: a queue that stays full or empty past its
timeout raises `QueueFull` or `QueueEmpty`, a failed checksum raises
`Crc32Error`, a failed authentication raises `HmacError`, and a connection
that cannot be opened raises `ConnectError`. Buffer misuse (freeing twice,
a foreign buffer) is not raised but recorded in `DebugCounters.errno`.

## What this package does not do

spacelink holds the pieces a stack is built from, not a running stack. It
has no packet router, no routing table, no network interfaces or drivers
(CAN, KISS serial, ZeroMQ), no sockets to bind, listen on or accept from,
and no service handlers such as ping or reboot. Reliable transport is not
available: `ConnectionTable.connect` with `O_RDP` raises `ConnectError`.
There is no packet bridge and no command-line program.