from __future__ import annotations

import hashlib
import hmac

import pytest

from cqreport.core.errors import ConfigurationError
from cqreport.services.signer import Signer, sign


def test_signature_is_prefixed_hmac_sha1_hex():
    body = b'{"type":"message","text":"hi"}'
    expected = "sha1=" + hmac.new(b"s", body, hashlib.sha1).hexdigest()

    assert sign("s", body) == expected
    assert Signer("s").sign(body) == expected


def test_known_vector():
    signature = sign("key", b"The quick brown fox jumps over the lazy dog")
    assert signature == "sha1=de7c9b85b8b78aa6bc8a7a36f70a90701c9db4d9"


def test_any_byte_change_changes_signature():
    signer = Signer("s")
    body = bytearray(b'{"post_type":"message","message":"hello"}')
    original = signer.sign(bytes(body))

    for index in range(len(body)):
        mutated = bytearray(body)
        mutated[index] ^= 0x01
        assert signer.sign(bytes(mutated)) != original


def test_signer_can_be_reused():
    signer = Signer("secret")
    first = signer.sign(b"a")
    signer.sign(b"something else entirely")
    assert signer.sign(b"a") == first


def test_text_bodies_are_signed_as_utf8():
    assert sign("k", "你好") == sign("k", "你好".encode("utf-8"))


def test_unusable_secret_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        Signer(None)  # type: ignore[arg-type]
