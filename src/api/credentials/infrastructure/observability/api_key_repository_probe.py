"""Domain probe for API key repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to API key record persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class APIKeyRepositoryProbe(Protocol):
    """Domain probe for API key repository operations.

    Records domain events during API key persistence operations.
    """

    def api_key_saved(self, api_key_id: str, platform: str) -> None:
        """Record that an API key record was successfully saved."""
        ...

    def api_key_retrieved(self, api_key_id: str) -> None:
        """Record that an API key record was retrieved."""
        ...

    def api_key_not_found(self, api_key_id: str) -> None:
        """Record that an API key record was not found by ID."""
        ...

    def api_keys_found(self, platform: str | None, count: int) -> None:
        """Record that API key records were queried."""
        ...

    def duplicate_key_name(self, platform: str, key_name: str) -> None:
        """Record that a key name is already used on the platform."""
        ...

    def store_operation_failed(self, operation: str, error: str) -> None:
        """Record that the underlying store rejected an operation."""
        ...

    def with_context(self, context: ObservationContext) -> APIKeyRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAPIKeyRepositoryProbe:
    """Default implementation of APIKeyRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAPIKeyRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultAPIKeyRepositoryProbe(logger=self._logger, context=context)

    def api_key_saved(self, api_key_id: str, platform: str) -> None:
        """Record that an API key record was successfully saved."""
        self._logger.info(
            "api_key_record_saved",
            api_key_id=api_key_id,
            platform=platform,
            **self._get_context_kwargs(),
        )

    def api_key_retrieved(self, api_key_id: str) -> None:
        """Record that an API key record was retrieved."""
        self._logger.debug(
            "api_key_record_retrieved",
            api_key_id=api_key_id,
            **self._get_context_kwargs(),
        )

    def api_key_not_found(self, api_key_id: str) -> None:
        """Record that an API key record was not found by ID."""
        self._logger.debug(
            "api_key_record_not_found",
            api_key_id=api_key_id,
            **self._get_context_kwargs(),
        )

    def api_keys_found(self, platform: str | None, count: int) -> None:
        """Record that API key records were queried."""
        self._logger.debug(
            "api_key_records_found",
            platform=platform or "all",
            count=count,
            **self._get_context_kwargs(),
        )

    def duplicate_key_name(self, platform: str, key_name: str) -> None:
        """Record that a key name is already used on the platform."""
        self._logger.warning(
            "duplicate_api_key_name",
            platform=platform,
            key_name=key_name,
            **self._get_context_kwargs(),
        )

    def store_operation_failed(self, operation: str, error: str) -> None:
        """Record that the underlying store rejected an operation."""
        self._logger.error(
            "api_key_store_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
