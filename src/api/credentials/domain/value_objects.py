"""Value objects for the credentials domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


class PlatformType(StrEnum):
    """External platforms whose API keys the scheduler stores."""

    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    OPENAI = "openai"


class APIKeySort(StrEnum):
    """Fields a key listing can be ordered by."""

    NAME = "name"
    PLATFORM = "platform"
    CREATED = "created"
    EXPIRES = "expires"
    STATUS = "status"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class APIKeyRecordId:
    """Identifier for an APIKeyRecord aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> APIKeyRecordId:
        """Generate a new APIKeyRecordId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> APIKeyRecordId:
        """Create APIKeyRecordId from string value.

        Args:
            value: ULID string

        Returns:
            APIKeyRecordId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid APIKeyRecordId: {value}") from e

        return cls(value=value)
