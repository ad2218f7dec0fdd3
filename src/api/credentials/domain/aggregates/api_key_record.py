"""APIKeyRecord aggregate for the credentials context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from credentials.domain.value_objects import APIKeyRecordId, PlatformType

# Usage statistics kept in the free-form metadata
LAST_USED_AT = "last_used_at"
USAGE_COUNT = "usage_count"
FAILURE_COUNT = "failure_count"


@dataclass
class APIKeyRecord:
    """A stored third-party platform credential.

    The raw secret never lives on the aggregate; ``encrypted_key`` is an
    envelope produced by the encryption engine and is opaque here.

    Business rules:
    - A record is created active
    - Rotation replaces the ciphertext in place, keeping id, platform and name
    - Deactivation is terminal and idempotent; nothing re-activates a record
    - Records are never deleted, deactivated ones are kept for audit
    - A record at or past ``expires_at`` is expired; no ``expires_at`` means
      it never expires
    - Uses and failed uses are counted in ``metadata``; recording them does
      not change ``updated_at``
    """

    id: APIKeyRecordId
    platform_type: PlatformType
    key_name: str
    encrypted_key: str
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
    expires_at: datetime | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def create(
        cls,
        platform_type: PlatformType,
        key_name: str,
        encrypted_key: str,
        expires_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> APIKeyRecord:
        """Factory method for creating a new, active API key record.

        Args:
            platform_type: The platform this credential authenticates to
            key_name: Human-readable label
            encrypted_key: Envelope holding the raw secret
            expires_at: Optional expiration timestamp
            metadata: Optional free-form metadata

        Returns:
            A new APIKeyRecord aggregate
        """
        now = datetime.now(UTC)
        return cls(
            id=APIKeyRecordId.generate(),
            platform_type=platform_type,
            key_name=key_name,
            encrypted_key=encrypted_key,
            created_at=now,
            updated_at=now,
            is_active=True,
            expires_at=expires_at,
            metadata=metadata,
        )

    def rotate(self, encrypted_key: str) -> None:
        """Replace the secret material of this record.

        Args:
            encrypted_key: Envelope holding the new raw secret

        Raises:
            APIKeyInactiveError: If the record has been deactivated
        """
        from credentials.ports.exceptions import APIKeyInactiveError

        if not self.is_active:
            raise APIKeyInactiveError(
                f"API key {self.id.value} is deactivated and cannot be rotated"
            )

        self.encrypted_key = encrypted_key
        self.updated_at = datetime.now(UTC)

    def deactivate(self) -> None:
        """Take this record out of service. Safe to call more than once."""
        if not self.is_active:
            return

        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def is_expired(self, at: datetime | None = None) -> bool:
        """Check whether this record has expired.

        Args:
            at: Point in time to check against (defaults to now)

        Returns:
            True if ``expires_at`` is set and ``at`` is at or past it
        """
        if self.expires_at is None:
            return False

        return (at or datetime.now(UTC)) >= self.expires_at

    def record_use(self, at: datetime) -> None:
        """Count a successful use of this key and stamp when it happened."""
        metadata = dict(self.metadata or {})
        metadata[USAGE_COUNT] = self.usage_count + 1
        metadata[LAST_USED_AT] = at.isoformat()
        self.metadata = metadata

    def record_failed_use(self) -> None:
        """Count a presented key that did not match this record."""
        metadata = dict(self.metadata or {})
        metadata[FAILURE_COUNT] = self.failure_count + 1
        self.metadata = metadata

    @property
    def last_used_at(self) -> datetime | None:
        value = (self.metadata or {}).get(LAST_USED_AT)
        if not isinstance(value, str):
            return None
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None

    @property
    def usage_count(self) -> int:
        return self._metadata_count(USAGE_COUNT)

    @property
    def failure_count(self) -> int:
        return self._metadata_count(FAILURE_COUNT)

    @property
    def error_rate(self) -> float:
        """Share of failed uses among all recorded uses, 0.0 when unused."""
        attempts = self.usage_count + self.failure_count
        if attempts == 0:
            return 0.0
        return self.failure_count / attempts

    def _metadata_count(self, key: str) -> int:
        value = (self.metadata or {}).get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value
