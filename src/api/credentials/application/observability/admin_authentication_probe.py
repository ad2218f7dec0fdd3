"""Protocol for observing access to the key management routes.

The presented token is never passed to the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AdminAuthenticationProbe(Protocol):
    """Domain probe for operator authentication."""

    def admin_authenticated(self) -> None:
        """Record that a request presented the admin token."""
        ...

    def admin_authentication_failed(self, reason: str) -> None:
        """Record that a request was refused access to key management."""
        ...

    def with_context(self, context: ObservationContext) -> AdminAuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAdminAuthenticationProbe:
    """Default implementation of AdminAuthenticationProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultAdminAuthenticationProbe:
        return DefaultAdminAuthenticationProbe(logger=self._logger, context=context)

    def admin_authenticated(self) -> None:
        self._logger.debug("admin_authenticated", **self._get_context_kwargs())

    def admin_authentication_failed(self, reason: str) -> None:
        self._logger.warning(
            "admin_authentication_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
