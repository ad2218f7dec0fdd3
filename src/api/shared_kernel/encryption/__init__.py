"""Encryption shared kernel module."""

from shared_kernel.encryption.engine import (
    DecryptionError,
    EncryptionEngine,
    EncryptionEngineError,
    EncryptionError,
    InvalidCiphertextError,
)
from shared_kernel.encryption.observability import (
    DefaultEncryptionProbe,
    EncryptionProbe,
)

__all__ = [
    "DecryptionError",
    "DefaultEncryptionProbe",
    "EncryptionEngine",
    "EncryptionEngineError",
    "EncryptionError",
    "EncryptionProbe",
    "InvalidCiphertextError",
]
