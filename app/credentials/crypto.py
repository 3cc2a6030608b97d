"""
TASKFLOW API - Token Encryption

AES-256-GCM for secrets at rest. The key is SHA-256 of TOKEN_ENCRYPTION_KEY,
each value gets a fresh 12-byte IV, and the stored form is
"<iv hex>:<tag hex>:<ciphertext hex>".
"""

import hashlib
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.config import settings

_IV_BYTES = 12
_TAG_BYTES = 16


class DecryptionError(ValueError):
    """Stored value is malformed or was encrypted under another key."""


class TokenCipher:
    """Reversible symmetric encryption for OAuth tokens and AI keys."""

    def __init__(self, secret: Optional[str] = None):
        secret = secret if secret is not None else settings.TOKEN_ENCRYPTION_KEY
        self._aesgcm = AESGCM(hashlib.sha256(secret.encode("utf-8")).digest())

    def encrypt(self, value: str) -> str:
        iv = os.urandom(_IV_BYTES)
        sealed = self._aesgcm.encrypt(iv, value.encode("utf-8"), None)
        data, tag = sealed[:-_TAG_BYTES], sealed[-_TAG_BYTES:]
        return f"{iv.hex()}:{tag.hex()}:{data.hex()}"

    def decrypt(self, value: str) -> str:
        try:
            iv_hex, tag_hex, data_hex = value.split(":")
            iv = bytes.fromhex(iv_hex)
            sealed = bytes.fromhex(data_hex) + bytes.fromhex(tag_hex)
            return self._aesgcm.decrypt(iv, sealed, None).decode("utf-8")
        except (ValueError, InvalidTag) as e:
            raise DecryptionError("Stored secret could not be decrypted") from e
