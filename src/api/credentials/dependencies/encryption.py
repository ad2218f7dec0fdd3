from functools import lru_cache

from infrastructure.settings import get_encryption_settings
from shared_kernel.encryption import DefaultEncryptionProbe, EncryptionEngine


@lru_cache
def get_encryption_engine() -> EncryptionEngine:
    """Get cached EncryptionEngine.

    The master key is read once from EncryptionSettings; the engine is
    shared by every request for the life of the process.

    Returns:
        EncryptionEngine bound to the configured master key
    """
    settings = get_encryption_settings()
    return EncryptionEngine(
        master_key=settings.master_key.get_secret_value(),
        probe=DefaultEncryptionProbe(),
    )
