"""Protocol for API key application service observability.

Defines the interface for domain probes that capture application-level
domain events for API key service operations.

Raw keys and decrypted secrets are never passed to the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class APIKeyServiceProbe(Protocol):
    """Domain probe for API key application service operations."""

    def api_key_added(self, api_key_id: str, platform: str, key_name: str) -> None:
        """Record that an API key was added."""
        ...

    def api_key_add_failed(self, platform: str, code: str, error: str) -> None:
        """Record that adding an API key failed."""
        ...

    def api_key_rotated(self, api_key_id: str, platform: str) -> None:
        """Record that an API key was rotated."""
        ...

    def api_key_rotation_failed(self, api_key_id: str, code: str, error: str) -> None:
        """Record that rotating an API key failed."""
        ...

    def api_key_deactivated(self, api_key_id: str, platform: str) -> None:
        """Record that an API key was deactivated."""
        ...

    def api_key_deactivation_failed(
        self, api_key_id: str, code: str, error: str
    ) -> None:
        """Record that deactivating an API key failed."""
        ...

    def api_keys_listed(self, platform: str | None, count: int) -> None:
        """Record that API keys were listed."""
        ...

    def api_key_list_failed(self, platform: str | None, error: str) -> None:
        """Record that listing API keys failed."""
        ...

    def active_key_retrieved(self, api_key_id: str, platform: str) -> None:
        """Record that the active key for a platform was decrypted."""
        ...

    def active_key_unavailable(
        self, platform: str, code: str, api_key_id: str | None = None
    ) -> None:
        """Record that no usable active key could be returned."""
        ...

    def key_validation_failed(self, platform: str, code: str) -> None:
        """Record that a presented key did not validate."""
        ...

    def key_usage_not_recorded(self, api_key_id: str, error: str) -> None:
        """Record that usage statistics for a key could not be stored."""
        ...

    def with_context(self, context: ObservationContext) -> APIKeyServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAPIKeyServiceProbe:
    """Default implementation of APIKeyServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAPIKeyServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAPIKeyServiceProbe(logger=self._logger, context=context)

    def api_key_added(self, api_key_id: str, platform: str, key_name: str) -> None:
        """Record that an API key was added."""
        self._logger.info(
            "api_key_added",
            api_key_id=api_key_id,
            platform=platform,
            key_name=key_name,
            **self._get_context_kwargs(),
        )

    def api_key_add_failed(self, platform: str, code: str, error: str) -> None:
        """Record that adding an API key failed."""
        self._logger.error(
            "api_key_add_failed",
            platform=platform,
            code=code,
            error=error,
            **self._get_context_kwargs(),
        )

    def api_key_rotated(self, api_key_id: str, platform: str) -> None:
        """Record that an API key was rotated."""
        self._logger.info(
            "api_key_rotated",
            api_key_id=api_key_id,
            platform=platform,
            **self._get_context_kwargs(),
        )

    def api_key_rotation_failed(self, api_key_id: str, code: str, error: str) -> None:
        """Record that rotating an API key failed."""
        self._logger.error(
            "api_key_rotation_failed",
            api_key_id=api_key_id,
            code=code,
            error=error,
            **self._get_context_kwargs(),
        )

    def api_key_deactivated(self, api_key_id: str, platform: str) -> None:
        """Record that an API key was deactivated."""
        self._logger.info(
            "api_key_deactivated",
            api_key_id=api_key_id,
            platform=platform,
            **self._get_context_kwargs(),
        )

    def api_key_deactivation_failed(
        self, api_key_id: str, code: str, error: str
    ) -> None:
        """Record that deactivating an API key failed."""
        self._logger.error(
            "api_key_deactivation_failed",
            api_key_id=api_key_id,
            code=code,
            error=error,
            **self._get_context_kwargs(),
        )

    def api_keys_listed(self, platform: str | None, count: int) -> None:
        """Record that API keys were listed."""
        self._logger.debug(
            "api_keys_listed",
            platform=platform or "all",
            count=count,
            **self._get_context_kwargs(),
        )

    def api_key_list_failed(self, platform: str | None, error: str) -> None:
        """Record that listing API keys failed."""
        self._logger.error(
            "api_key_list_failed",
            platform=platform or "all",
            error=error,
            **self._get_context_kwargs(),
        )

    def active_key_retrieved(self, api_key_id: str, platform: str) -> None:
        """Record that the active key for a platform was decrypted."""
        self._logger.debug(
            "active_key_retrieved",
            api_key_id=api_key_id,
            platform=platform,
            **self._get_context_kwargs(),
        )

    def active_key_unavailable(
        self, platform: str, code: str, api_key_id: str | None = None
    ) -> None:
        """Record that no usable active key could be returned."""
        self._logger.warning(
            "active_key_unavailable",
            platform=platform,
            code=code,
            api_key_id=api_key_id,
            **self._get_context_kwargs(),
        )

    def key_validation_failed(self, platform: str, code: str) -> None:
        """Record that a presented key did not validate."""
        self._logger.info(
            "key_validation_failed",
            platform=platform,
            code=code,
            **self._get_context_kwargs(),
        )

    def key_usage_not_recorded(self, api_key_id: str, error: str) -> None:
        """Record that usage statistics for a key could not be stored."""
        self._logger.warning(
            "key_usage_not_recorded",
            api_key_id=api_key_id,
            error=error,
            **self._get_context_kwargs(),
        )
