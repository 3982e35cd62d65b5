import hashlib
import hmac as std_hmac

import pytest

from spacelink.hmac import (
    HMAC_KEY_LENGTH,
    HMAC_LENGTH,
    Hmac,
    HmacAuthenticator,
    HmacError,
    hmac_memory,
)


@pytest.mark.parametrize("key", [b"k", b"placeholder", b"x" * 64, b"y" * 65, bytes(range(200))])
@pytest.mark.parametrize("data", [b"", b"message", b"z" * 300])
def test_matches_reference(key, data):
    assert hmac_memory(key, data) == std_hmac.new(key, data, hashlib.sha1).digest()


def test_empty_key_rejected():
    with pytest.raises(HmacError):
        hmac_memory(b"", b"data")


def test_incremental_matches_one_shot():
    mac = Hmac(b"placeholder")
    mac.update(b"part one, ")
    mac.update(b"part two")
    assert mac.digest() == hmac_memory(b"placeholder", b"part one, part two")


def test_append_verify_round_trip():
    auth = HmacAuthenticator(b"secret")
    framed = auth.append(b"payload")
    assert len(framed) == len(b"payload") + HMAC_LENGTH
    assert auth.verify(framed) == b"payload"


def test_trailer_uses_derived_key():
    auth = HmacAuthenticator(b"secret")
    derived = hashlib.sha1(b"secret").digest()[:HMAC_KEY_LENGTH]
    framed = auth.append(b"payload")
    assert framed[-HMAC_LENGTH:] == std_hmac.new(derived, b"payload", hashlib.sha1).digest()[:HMAC_LENGTH]


def test_default_key_is_zeroed():
    auth = HmacAuthenticator()
    zero_key = bytes(HMAC_KEY_LENGTH)
    framed = auth.append(b"abc")
    assert framed[-HMAC_LENGTH:] == hmac_memory(zero_key, b"abc")[:HMAC_LENGTH]


def test_wrong_key_fails_verification():
    framed = HmacAuthenticator(b"secret").append(b"payload")
    with pytest.raises(HmacError):
        HmacAuthenticator(b"placeholder").verify(framed)


def test_set_key_changes_trailer():
    auth = HmacAuthenticator(b"secret")
    framed = auth.append(b"payload")
    auth.set_key(b"placeholder")
    with pytest.raises(HmacError):
        auth.verify(framed)


def test_verify_too_short():
    with pytest.raises(HmacError):
        HmacAuthenticator().verify(b"abc")


def test_append_respects_max_length():
    auth = HmacAuthenticator(b"secret")
    with pytest.raises(HmacError):
        auth.append(b"x" * 10, max_length=13)
    assert len(auth.append(b"x" * 10, max_length=14)) == 14