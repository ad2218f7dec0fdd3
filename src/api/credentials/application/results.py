"""Result types returned by the API key service.

The service never raises to its callers. Every operation returns either
an ``APIKeyResult`` carrying ``data`` or an ``error``, or a
``KeyValidationResult`` for validation checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class APIKeyErrorCode(StrEnum):
    """Error taxonomy for API key operations."""

    ENCRYPTION_FAILED = "ENCRYPTION_FAILED"
    DECRYPTION_FAILED = "DECRYPTION_FAILED"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    KEY_EXPIRED = "KEY_EXPIRED"
    DATABASE_ERROR = "DATABASE_ERROR"
    INVALID_KEY = "INVALID_KEY"
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(frozen=True)
class APIKeyError:
    """A failed API key operation.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message, safe to show to users
        details: Optional diagnostics (never contains secrets)
    """

    code: APIKeyErrorCode
    message: str
    details: dict[str, Any] | None = None

    def as_dict(self, include_details: bool = True) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary.

        Args:
            include_details: Whether to include the diagnostics, which may
                carry driver messages unsuitable for HTTP clients
        """
        result: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if include_details and self.details is not None:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class APIKeyResult(Generic[T]):
    """Outcome of an API key operation: exactly one of data or error is set."""

    data: T | None = None
    error: APIKeyError | None = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, data: T) -> APIKeyResult[T]:
        return cls(data=data, error=None)

    @classmethod
    def failure(
        cls,
        code: APIKeyErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> APIKeyResult[T]:
        return cls(data=None, error=APIKeyError(code=code, message=message, details=details))


@dataclass(frozen=True)
class KeyValidationResult:
    """Outcome of comparing a presented key against the active stored key."""

    is_valid: bool
    error: APIKeyError | None = None
