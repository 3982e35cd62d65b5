"""Pure SHA-1 message digest."""

from __future__ import annotations

import struct

BLOCK_SIZE = 64
DIGEST_SIZE = 20

_MASK = 0xFFFFFFFF
_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)


def _rol(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _compress(state: tuple[int, ...], block: bytes) -> tuple[int, ...]:
    words = list(struct.unpack(">16I", block))
    for i in range(16, 80):
        words.append(_rol(words[i - 3] ^ words[i - 8] ^ words[i - 14] ^ words[i - 16], 1))

    a, b, c, d, e = state
    for i, word in enumerate(words):
        if i < 20:
            f, k = d ^ (b & (c ^ d)), 0x5A827999
        elif i < 40:
            f, k = b ^ c ^ d, 0x6ED9EBA1
        elif i < 60:
            f, k = (b & c) | (d & (b | c)), 0x8F1BBCDC
        else:
            f, k = b ^ c ^ d, 0xCA62C1D6
        a, b, c, d, e = (_rol(a, 5) + f + e + word + k) & _MASK, a, _rol(b, 30), c, d

    return tuple((s + v) & _MASK for s, v in zip(state, (a, b, c, d, e)))


class Sha1:
    """Incremental SHA-1 hasher."""

    def __init__(self, data: bytes = b"") -> None:
        self._state = _INITIAL_STATE
        self._pending = b""
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the hash."""
        pending = self._pending + bytes(data)
        self._length = (self._length + len(data) * 8) & 0xFFFFFFFFFFFFFFFF
        full = len(pending) - len(pending) % BLOCK_SIZE
        state = self._state
        for start in range(0, full, BLOCK_SIZE):
            state = _compress(state, pending[start:start + BLOCK_SIZE])
        self._state = state
        self._pending = pending[full:]

    def digest(self) -> bytes:
        """Return the 20-byte digest of everything fed so far."""
        tail = self._pending + b"\x80"
        tail += b"\x00" * ((56 - len(tail)) % BLOCK_SIZE)
        tail += self._length.to_bytes(8, "big")
        state = self._state
        for start in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[start:start + BLOCK_SIZE])
        return struct.pack(">5I", *state)


def sha1_memory(data: bytes) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return Sha1(data).digest()