# backend/app/security/cipher.py
"""
AES-256-GCM encryption for stored OTP secrets.

Storage format (must not change without a migration):

    <nonce hex>:<ciphertext hex>:<tag hex>

- nonce: 12 random bytes, fresh for every encryption
- tag:   16-byte GCM authentication tag

Nothing in this module logs plaintext, blobs or key material.
"""
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from backend.app.core.config import MASTER_KEY_BYTES
from backend.app.core.errors import (
    ConfigurationError,
    CryptoFormatError,
    CryptoIntegrityError,
)

NONCE_BYTES = 12
TAG_BYTES = 16
SEPARATOR = ":"

# bytes.fromhex alone would also accept embedded whitespace
_HEX_SEGMENT = re.compile(r"[0-9a-fA-F]*")


def encrypt(secret: str, master_key: bytes) -> str:
    """
    Encrypt a secret string into a nonce:ciphertext:tag blob.

    Args:
        secret: Plaintext secret (e.g. a base32 TOTP seed)
        master_key: 32-byte AES key

    Returns:
        Hex blob safe to store in a text column
    """
    nonce = os.urandom(NONCE_BYTES)
    # AESGCM appends the tag to the ciphertext
    sealed = AESGCM(master_key).encrypt(nonce, secret.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
    return SEPARATOR.join((nonce.hex(), ciphertext.hex(), tag.hex()))


def _split_blob(blob: str):
    if not isinstance(blob, str):
        raise CryptoFormatError("Encrypted secret must be a string")

    parts = blob.split(SEPARATOR)
    if len(parts) != 3:
        raise CryptoFormatError("Encrypted secret must have three segments")

    if not all(_HEX_SEGMENT.fullmatch(part) and len(part) % 2 == 0 for part in parts):
        raise CryptoFormatError("Encrypted secret segments must be hex")
    nonce, ciphertext, tag = (bytes.fromhex(part) for part in parts)

    if len(nonce) != NONCE_BYTES or len(tag) != TAG_BYTES:
        raise CryptoFormatError("Encrypted secret has wrong nonce or tag length")

    return nonce, ciphertext, tag


def decrypt(blob: str, master_key: bytes) -> str:
    """
    Decrypt a blob produced by encrypt().

    Raises:
        CryptoFormatError: blob is not three hex segments of the right size
        CryptoIntegrityError: tag check failed (tampered blob or wrong key)
    """
    nonce, ciphertext, tag = _split_blob(blob)
    try:
        plaintext = AESGCM(master_key).decrypt(nonce, ciphertext + tag, None)
    except InvalidTag as exc:
        raise CryptoIntegrityError("Authentication tag mismatch") from exc
    return plaintext.decode("utf-8")


class SecretCipher:
    """encrypt()/decrypt() bound to one master key."""

    def __init__(self, master_key: bytes):
        if len(master_key) != MASTER_KEY_BYTES:
            raise ConfigurationError(f"Master key must be {MASTER_KEY_BYTES} bytes")
        self._key = master_key

    def __repr__(self):
        return "SecretCipher(<key hidden>)"

    def encrypt(self, secret: str) -> str:
        return encrypt(secret, self._key)

    def decrypt(self, blob: str) -> str:
        return decrypt(blob, self._key)
