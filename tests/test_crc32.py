import pytest

from spacelink.crc32 import (
    Crc32,
    Crc32Error,
    append_crc32,
    crc32_memory,
    verify_crc32,
)


def test_check_value():
    assert crc32_memory(b"123456789") == 0xE3069283


def test_empty_is_zero():
    assert crc32_memory(b"") == 0


def test_incremental_matches_one_shot():
    crc = Crc32(b"Hello ")
    crc.update(b"world")
    assert crc.digest() == crc32_memory(b"Hello world")


def test_digest_does_not_consume_state():
    crc = Crc32(b"abc")
    first = crc.digest()
    assert crc.digest() == first
    crc.update(b"d")
    assert crc.digest() == crc32_memory(b"abcd")


def test_append_adds_four_bytes():
    framed = append_crc32(b"payload")
    assert framed[:-4] == b"payload"
    assert len(framed) == len(b"payload") + 4


def test_append_then_verify_round_trip():
    assert verify_crc32(append_crc32(b"Hello world A")) == b"Hello world A"


def test_append_respects_max_length():
    with pytest.raises(Crc32Error):
        append_crc32(b"x" * 10, max_length=13)
    assert len(append_crc32(b"x" * 10, max_length=14)) == 14


def test_verify_with_header_included():
    header = b"\x01\x02\x03\x04"
    payload = b"data"
    trailer = crc32_memory(header + payload).to_bytes(4, "big")
    assert verify_crc32(payload + trailer, header) == payload


def test_verify_falls_back_to_payload_only():
    framed = append_crc32(b"data")
    assert verify_crc32(framed, b"\xaa\xbb\xcc\xdd") == b"data"


def test_verify_detects_corruption():
    framed = bytearray(append_crc32(b"data"))
    framed[0] ^= 0xFF
    with pytest.raises(Crc32Error):
        verify_crc32(bytes(framed))


def test_verify_too_short():
    with pytest.raises(Crc32Error):
        verify_crc32(b"abc")