from __future__ import annotations

import base64

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from iosbuild.aes import decrypt_token, is_encrypted, strip_marker
from iosbuild.errors import BuildError

KEY = "0123456789abcdef0123456789abcdef"


def _encrypt(plain: str, key: str) -> str:
    key_bytes = key.encode("utf-8")
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plain.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key_bytes), modes.CBC(key_bytes[:16])).encryptor()
    return base64.b64encode(encryptor.update(padded) + encryptor.finalize()).decode("ascii")


def test_decrypt_token_with_marker() -> None:
    encrypted = "aes:" + _encrypt("upload-token-1", KEY)

    assert decrypt_token(encrypted, KEY) == "upload-token-1"


def test_decrypt_token_short_key_is_padded() -> None:
    short_key = "secret"
    encrypted = _encrypt("tok", short_key.ljust(16, "\0"))

    assert decrypt_token(encrypted, short_key) == "tok"


def test_decrypt_token_wrong_key_fails() -> None:
    encrypted = _encrypt("upload-token-1", KEY)

    with pytest.raises(BuildError):
        decrypt_token(encrypted, "another-key-entirely-32-bytes!!!")


def test_marker_helpers() -> None:
    assert is_encrypted("aes:abc")
    assert not is_encrypted("abc")
    assert strip_marker("aes:abc") == "abc"
    assert strip_marker("abc") == "abc"
