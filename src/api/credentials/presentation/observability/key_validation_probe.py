"""Domain probe for inbound API key validation.

Captures the outcome of every request gated by a platform API key guard.
The presented key itself is never recorded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class KeyValidationProbe(Protocol):
    """Domain probe for the platform API key guard."""

    def api_key_missing(self, platform: str) -> None:
        """Record that a request arrived without an X-API-Key header."""
        ...

    def api_key_rejected(self, platform: str, code: str) -> None:
        """Record that a presented key did not validate."""
        ...

    def api_key_accepted(self, platform: str) -> None:
        """Record that a presented key matched the active stored key."""
        ...

    def api_key_validation_errored(self, platform: str, error: str) -> None:
        """Record that validation itself failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> KeyValidationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultKeyValidationProbe:
    """Default implementation of KeyValidationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultKeyValidationProbe:
        """Create a new probe with observation context bound."""
        return DefaultKeyValidationProbe(logger=self._logger, context=context)

    def api_key_missing(self, platform: str) -> None:
        self._logger.warning(
            "platform_api_key_missing",
            platform=platform,
            **self._get_context_kwargs(),
        )

    def api_key_rejected(self, platform: str, code: str) -> None:
        self._logger.warning(
            "platform_api_key_rejected",
            platform=platform,
            code=code,
            **self._get_context_kwargs(),
        )

    def api_key_accepted(self, platform: str) -> None:
        self._logger.debug(
            "platform_api_key_accepted",
            platform=platform,
            **self._get_context_kwargs(),
        )

    def api_key_validation_errored(self, platform: str, error: str) -> None:
        self._logger.error(
            "platform_api_key_validation_errored",
            platform=platform,
            error=error,
            **self._get_context_kwargs(),
        )
