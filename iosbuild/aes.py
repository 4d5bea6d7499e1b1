import base64

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import BuildError

ENCRYPTED_MARKER = "aes:"


def is_encrypted(token: str) -> bool:
    return token.startswith(ENCRYPTED_MARKER)


def strip_marker(token: str) -> str:
    return token[len(ENCRYPTED_MARKER):] if is_encrypted(token) else token


def _fit_key(key: bytes) -> bytes:
    if len(key) in (16, 24, 32):
        return key
    if len(key) < 16:
        return key.ljust(16, b"\0")
    if len(key) < 24:
        return key[:16]
    if len(key) < 32:
        return key[:24]
    return key[:32]


def decrypt_token(encrypted, key_string: str) -> str:
    """
    Decrypt an upload token stored AES-CBC encrypted with PKCS7 padding.

    The key string is used directly as bytes (padded or truncated to an AES key
    size) and the IV is its first 16 bytes, so tokens encrypted by the server
    side tooling can be stored in the credential table as-is.

    Parameters:
    - encrypted: base64 string (an "aes:" marker is allowed) or raw bytes
    - key_string: the shared secret as a UTF-8 string

    Returns:
    - the plain token
    """
    try:
        key = _fit_key(key_string.encode("utf-8"))
        iv = key[:16]

        if isinstance(encrypted, str):
            ciphertext = base64.b64decode(strip_marker(encrypted))
        else:
            ciphertext = encrypted

        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")

    except Exception as e:
        raise BuildError(f"Decryption failed: {e}. Check the credential secret key and the stored token.") from e
