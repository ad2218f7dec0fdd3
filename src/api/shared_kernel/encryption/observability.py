"""Domain probe for encryption engine operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to sealing and opening secrets.

Plaintext, ciphertext and key material are never passed to the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EncryptionProbe(Protocol):
    """Domain probe for encryption engine operations."""

    def encryption_failed(self, reason: str) -> None:
        """Record that a plaintext could not be encrypted."""
        ...

    def decryption_failed(self, reason: str) -> None:
        """Record that an envelope could not be decrypted."""
        ...

    def invalid_ciphertext_rejected(self) -> None:
        """Record that a malformed envelope was rejected before decryption."""
        ...

    def master_key_rotated(self) -> None:
        """Record that an envelope was re-encrypted under a new master key."""
        ...

    def with_context(self, context: ObservationContext) -> EncryptionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEncryptionProbe:
    """Default implementation of EncryptionProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultEncryptionProbe:
        """Create a new probe with observation context bound."""
        return DefaultEncryptionProbe(logger=self._logger, context=context)

    def encryption_failed(self, reason: str) -> None:
        self._logger.error(
            "encryption_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def decryption_failed(self, reason: str) -> None:
        self._logger.warning(
            "decryption_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def invalid_ciphertext_rejected(self) -> None:
        self._logger.warning(
            "invalid_ciphertext_rejected",
            **self._get_context_kwargs(),
        )

    def master_key_rotated(self) -> None:
        self._logger.info(
            "master_key_rotated",
            **self._get_context_kwargs(),
        )
