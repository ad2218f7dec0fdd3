"""Authenticated symmetric encryption for secrets stored at rest.

Every call to ``encrypt`` draws a fresh salt and nonce, derives a one-off
AES-256 key from the master key with scrypt, and seals the plaintext with
AES-GCM. The result is a self-describing envelope:

    base64(salt[16] | iv[12] | tag[16] | ciphertext)

Only a holder of the same master key can open it, and any tampering is
detected by the GCM tag. The engine raises exceptions; callers that need a
result-style API (such as the credentials service) translate them.
"""

from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from shared_kernel.encryption.observability import (
    DefaultEncryptionProbe,
    EncryptionProbe,
)

SALT_LENGTH = 16
IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32

# Salt + IV + tag + at least one byte of ciphertext
MIN_ENVELOPE_LENGTH = SALT_LENGTH + IV_LENGTH + TAG_LENGTH + 1

# scrypt cost parameters
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1


class EncryptionEngineError(Exception):
    """Base class for encryption engine failures."""

    pass


class EncryptionError(EncryptionEngineError):
    """Raised when a plaintext could not be sealed."""

    pass


class InvalidCiphertextError(EncryptionEngineError):
    """Raised when a ciphertext is not a structurally valid envelope.

    Raised before any key derivation is attempted.
    """

    pass


class DecryptionError(EncryptionEngineError):
    """Raised when an envelope could not be opened.

    Deliberately carries no detail: a wrong master key, a tampered tag and
    a corrupted body are indistinguishable to the caller.
    """

    pass


class EncryptionEngine:
    """AES-256-GCM envelope encryption keyed by a master secret.

    The master key is read-only after construction. To move a ciphertext
    to a new master key use ``rotate_master_key``.
    """

    def __init__(self, master_key: str, probe: EncryptionProbe | None = None):
        """Initialize the engine.

        Args:
            master_key: The master secret every derived key is bound to.
            probe: Optional domain probe for observability.

        Raises:
            ValueError: If the master key is empty.
        """
        if not master_key:
            raise ValueError("Master key must not be empty")

        self._master_key = master_key.encode("utf-8")
        self._probe = probe or DefaultEncryptionProbe()

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
        return kdf.derive(self._master_key)

    def encrypt(self, plaintext: str) -> str:
        """Seal a plaintext secret into a base64 envelope.

        Two calls with the same plaintext never return the same envelope.

        Args:
            plaintext: The secret to encrypt

        Returns:
            The base64-encoded envelope

        Raises:
            EncryptionError: If the underlying cipher fails
        """
        try:
            salt = os.urandom(SALT_LENGTH)
            iv = os.urandom(IV_LENGTH)
            key = self._derive_key(salt)
            sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
        except Exception as e:
            self._probe.encryption_failed(reason=type(e).__name__)
            raise EncryptionError("Encryption failed") from e

        # AESGCM appends the tag; the envelope carries it ahead of the body
        body, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(salt + iv + tag + body).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Open an envelope produced by ``encrypt``.

        Args:
            ciphertext: The base64-encoded envelope

        Returns:
            The recovered plaintext

        Raises:
            InvalidCiphertextError: If the envelope is malformed or too short
            DecryptionError: If authentication or decoding fails
        """
        combined = self._decode(ciphertext)
        if combined is None:
            self._probe.invalid_ciphertext_rejected()
            raise InvalidCiphertextError("Invalid ciphertext format")

        salt = combined[:SALT_LENGTH]
        iv = combined[SALT_LENGTH : SALT_LENGTH + IV_LENGTH]
        tag = combined[SALT_LENGTH + IV_LENGTH : SALT_LENGTH + IV_LENGTH + TAG_LENGTH]
        body = combined[SALT_LENGTH + IV_LENGTH + TAG_LENGTH :]

        try:
            key = self._derive_key(salt)
            plaintext = AESGCM(key).decrypt(iv, body + tag, None)
            return plaintext.decode("utf-8")
        except InvalidTag as e:
            self._probe.decryption_failed(reason="authentication_failed")
            raise DecryptionError("Decryption failed") from e
        except Exception as e:
            self._probe.decryption_failed(reason=type(e).__name__)
            raise DecryptionError("Decryption failed") from e

    def is_valid_ciphertext(self, ciphertext: str) -> bool:
        """Check that a ciphertext is a structurally valid envelope.

        Only decodes and checks the length; no decryption is attempted.
        """
        return self._decode(ciphertext) is not None

    def rotate_master_key(self, ciphertext: str, new_master_key: str) -> str:
        """Re-encrypt an envelope under a different master key.

        The plaintext only ever lives in memory for the duration of the call.

        Args:
            ciphertext: Envelope sealed under this engine's master key
            new_master_key: The master key for the new envelope

        Returns:
            A new envelope that only ``new_master_key`` can open

        Raises:
            InvalidCiphertextError: If the envelope is malformed
            DecryptionError: If the envelope cannot be opened with the current key
            EncryptionError: If re-encryption fails
        """
        plaintext = self.decrypt(ciphertext)
        rotated = EncryptionEngine(new_master_key, probe=self._probe).encrypt(plaintext)
        self._probe.master_key_rotated()
        return rotated

    @staticmethod
    def _decode(ciphertext: str) -> bytes | None:
        """Decode an envelope, returning None when it is not usable."""
        if not isinstance(ciphertext, str) or not ciphertext:
            return None
        try:
            combined = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError):
            return None
        if len(combined) < MIN_ENVELOPE_LENGTH:
            return None
        return combined
