"""CRC-32C (Castagnoli) checksums and trailer handling for packets."""

from __future__ import annotations

CRC32_LENGTH = 4

_POLYNOMIAL = 0x82F63B78
_MASK = 0xFFFFFFFF


def _make_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ _POLYNOMIAL if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_TABLE = _make_table()


class Crc32Error(ValueError):
    """Raised when a CRC32 trailer cannot be appended or does not match."""


class Crc32:
    """Incremental CRC-32C calculator."""

    def __init__(self, data: bytes = b"") -> None:
        self._crc = _MASK
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the checksum."""
        crc = self._crc
        for byte in data:
            crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
        self._crc = crc

    def digest(self) -> int:
        """Return the checksum of everything fed so far."""
        return self._crc ^ _MASK


def crc32_memory(data: bytes) -> int:
    """Return the CRC-32C of ``data``."""
    return Crc32(data).digest()


def append_crc32(data: bytes, max_length: int | None = None) -> bytes:
    """Return ``data`` followed by its CRC-32C in network byte order.

    Raises Crc32Error if the result would exceed ``max_length``.
    """
    if max_length is not None and len(data) + CRC32_LENGTH > max_length:
        raise Crc32Error("no room for CRC32 trailer")
    return bytes(data) + crc32_memory(data).to_bytes(CRC32_LENGTH, "big")


def verify_crc32(data: bytes, header: bytes = b"") -> bytes:
    """Check the CRC32 trailer of ``data`` and return the data without it.

    The checksum is first tried over ``header`` plus the payload, then over
    the payload alone.
    """
    if len(data) < CRC32_LENGTH:
        raise Crc32Error("packet too short for CRC32")
    payload, trailer = bytes(data[:-CRC32_LENGTH]), bytes(data[-CRC32_LENGTH:])
    received = int.from_bytes(trailer, "big")
    if crc32_memory(bytes(header) + payload) == received:
        return payload
    if crc32_memory(payload) == received:
        return payload
    raise Crc32Error("CRC32 mismatch")