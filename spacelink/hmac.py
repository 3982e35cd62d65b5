"""HMAC-SHA1 and truncated packet authentication codes."""

from __future__ import annotations

from .sha1 import BLOCK_SIZE, DIGEST_SIZE, Sha1, sha1_memory

HMAC_LENGTH = 4
HMAC_KEY_LENGTH = 16


class HmacError(ValueError):
    """Raised for invalid keys, missing room, or authentication failures."""


class Hmac:
    """Incremental HMAC-SHA1."""

    def __init__(self, key: bytes) -> None:
        if not key:
            raise HmacError("HMAC key must not be empty")
        key = bytes(key)
        if len(key) > BLOCK_SIZE:
            key = sha1_memory(key)
        self._key = key.ljust(BLOCK_SIZE, b"\x00")
        self._inner = Sha1(bytes(byte ^ 0x36 for byte in self._key))

    def update(self, data: bytes) -> None:
        """Feed more message bytes."""
        self._inner.update(data)

    def digest(self) -> bytes:
        """Return the 20-byte authentication code."""
        outer = Sha1(bytes(byte ^ 0x5C for byte in self._key))
        outer.update(self._inner.digest())
        return outer.digest()


def hmac_memory(key: bytes, data: bytes) -> bytes:
    """Return the HMAC-SHA1 of ``data`` under ``key``."""
    mac = Hmac(key)
    mac.update(data)
    return mac.digest()


class HmacAuthenticator:
    """Appends and checks truncated HMAC trailers using a derived key."""

    def __init__(self, key: bytes | None = None) -> None:
        self._key = bytes(HMAC_KEY_LENGTH)
        if key is not None:
            self.set_key(key)

    def set_key(self, key: bytes) -> None:
        """Derive the working key from ``key`` with SHA-1."""
        self._key = sha1_memory(key)[:HMAC_KEY_LENGTH]

    def _mac(self, data: bytes) -> bytes:
        return hmac_memory(self._key, data)[:HMAC_LENGTH]

    def append(self, data: bytes, max_length: int | None = None) -> bytes:
        """Return ``data`` followed by its truncated HMAC."""
        if max_length is not None and len(data) + HMAC_LENGTH > max_length:
            raise HmacError("no room for HMAC trailer")
        return bytes(data) + self._mac(data)

    def verify(self, data: bytes) -> bytes:
        """Check the HMAC trailer and return ``data`` without it."""
        if len(data) < HMAC_LENGTH:
            raise HmacError("packet too short for HMAC")
        body, trailer = bytes(data[:-HMAC_LENGTH]), bytes(data[-HMAC_LENGTH:])
        if self._mac(body) != trailer:
            raise HmacError("HMAC mismatch")
        return body


__all__ = [
    "DIGEST_SIZE",
    "HMAC_KEY_LENGTH",
    "HMAC_LENGTH",
    "Hmac",
    "HmacAuthenticator",
    "HmacError",
    "hmac_memory",
]