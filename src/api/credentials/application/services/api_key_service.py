"""API Key application service for the credentials bounded context.

Orchestrates the lifecycle of third-party platform API keys: encryption
before every write, decryption after every read, expiration and naming
rules, and validation of presented keys. All persistence goes through the
IAPIKeyRecordRepository port.
"""

from __future__ import annotations

import hmac
from datetime import UTC, datetime, timedelta
from typing import Callable

from credentials.application.config import APIKeyServiceConfig
from credentials.application.metrics import (
    DEFAULT_EXPIRING_WITHIN,
    PlatformKeyMetrics,
    summarize_keys,
)
from credentials.application.observability.api_key_service_probe import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from credentials.application.results import (
    APIKeyError,
    APIKeyErrorCode,
    APIKeyResult,
    KeyValidationResult,
)
from credentials.application.sorting import sort_records
from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import (
    APIKeyRecordId,
    APIKeySort,
    PlatformType,
    SortDirection,
)
from credentials.ports.exceptions import APIKeyInactiveError
from credentials.ports.repositories import IAPIKeyRecordRepository
from shared_kernel.encryption import EncryptionEngine


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _encode_presented_key(presented_key: object) -> bytes | None:
    """Return the UTF-8 bytes of a presented key, or None if it has none."""
    if not isinstance(presented_key, str):
        return None
    try:
        return presented_key.encode("utf-8")
    except UnicodeEncodeError:
        return None


class APIKeyService:
    """Application service for platform API key management.

    The only reader and mutator of APIKeyRecords. Every public method
    returns a typed result; exceptions from the encryption engine and the
    repository are caught here and mapped to APIKeyErrorCode values.

    Adding a key never deactivates other keys for the same platform, and
    the per-platform cap is a check-then-act against the repository. Two
    concurrent adds may both pass the check.
    """

    def __init__(
        self,
        api_key_repository: IAPIKeyRecordRepository,
        encryption_engine: EncryptionEngine,
        config: APIKeyServiceConfig | None = None,
        probe: APIKeyServiceProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize APIKeyService with dependencies.

        Args:
            api_key_repository: Store adapter for API key records
            encryption_engine: Engine used to seal and open raw keys
            config: Business-rule configuration (defaults apply when omitted)
            probe: Optional domain probe for observability
            clock: Optional source of the current UTC time
        """
        self._api_key_repository = api_key_repository
        self._engine = encryption_engine
        self._config = config or APIKeyServiceConfig()
        self._probe = probe or DefaultAPIKeyServiceProbe()
        self._clock = clock or _utc_now

    @property
    def config(self) -> APIKeyServiceConfig:
        return self._config

    async def add_key(
        self,
        platform: PlatformType,
        raw_key: str,
        name: str,
        expires_at: datetime | None = None,
    ) -> APIKeyResult[APIKeyRecord]:
        """Encrypt and store a new, active API key.

        Args:
            platform: The platform the key authenticates to
            raw_key: The plaintext secret (never stored or logged)
            name: Human-readable label; surrounding whitespace is stripped
                before the length check and is not stored
            expires_at: Optional expiration; defaults to the configured
                lifetime when one is set

        Returns:
            APIKeyResult with the stored record (ciphertext only)
        """
        if isinstance(name, str):
            name = name.strip()
        name_error = self._validate_key_name(name)
        if name_error is not None:
            self._probe.api_key_add_failed(
                platform=platform.value,
                code=APIKeyErrorCode.VALIDATION_ERROR.value,
                error=name_error,
            )
            return APIKeyResult.failure(APIKeyErrorCode.VALIDATION_ERROR, name_error)

        if not raw_key:
            self._probe.api_key_add_failed(
                platform=platform.value,
                code=APIKeyErrorCode.VALIDATION_ERROR.value,
                error="empty key",
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.VALIDATION_ERROR, "API key value is required"
            )

        try:
            encrypted_key = self._engine.encrypt(raw_key)
        except Exception as e:
            self._probe.api_key_add_failed(
                platform=platform.value,
                code=APIKeyErrorCode.ENCRYPTION_FAILED.value,
                error=str(e),
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.ENCRYPTION_FAILED,
                "Failed to encrypt API key",
                details={"reason": str(e)},
            )

        try:
            cap = self._config.max_keys_per_platform
            if cap is not None:
                existing = await self._api_key_repository.count(platform)
                if existing >= cap:
                    message = (
                        f"Maximum number of API keys ({cap}) reached for "
                        f"platform: {platform.value}"
                    )
                    self._probe.api_key_add_failed(
                        platform=platform.value,
                        code=APIKeyErrorCode.VALIDATION_ERROR.value,
                        error=message,
                    )
                    return APIKeyResult.failure(
                        APIKeyErrorCode.VALIDATION_ERROR,
                        message,
                        details={"max_keys_per_platform": cap, "existing": existing},
                    )

            record = APIKeyRecord.create(
                platform_type=platform,
                key_name=name,
                encrypted_key=encrypted_key,
                expires_at=self._resolve_expiration(expires_at),
            )
            stored = await self._api_key_repository.save(record)

        except Exception as e:
            self._probe.api_key_add_failed(
                platform=platform.value,
                code=APIKeyErrorCode.DATABASE_ERROR.value,
                error=str(e),
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.DATABASE_ERROR,
                "Failed to store API key",
                details={"reason": str(e)},
            )

        self._probe.api_key_added(
            api_key_id=stored.id.value,
            platform=platform.value,
            key_name=name,
        )
        return APIKeyResult.success(stored)

    async def rotate_key(
        self, key_id: APIKeyRecordId, new_raw_key: str
    ) -> APIKeyResult[APIKeyRecord]:
        """Replace the secret of an existing key in place.

        The record keeps its id, platform and name; only the ciphertext and
        ``updated_at`` change.

        Args:
            key_id: The record to rotate
            new_raw_key: The new plaintext secret

        Returns:
            APIKeyResult with the updated record
        """
        if not new_raw_key:
            return self._rotation_failure(
                key_id,
                APIKeyResult.failure(
                    APIKeyErrorCode.VALIDATION_ERROR, "API key value is required"
                ),
            )

        try:
            encrypted_key = self._engine.encrypt(new_raw_key)
        except Exception as e:
            return self._rotation_failure(
                key_id,
                APIKeyResult.failure(
                    APIKeyErrorCode.ENCRYPTION_FAILED,
                    "Failed to encrypt API key",
                    details={"reason": str(e)},
                ),
            )

        try:
            record = await self._api_key_repository.get_by_id(key_id)
            if record is None:
                return self._rotation_failure(
                    key_id,
                    APIKeyResult.failure(
                        APIKeyErrorCode.KEY_NOT_FOUND,
                        f"API key not found: {key_id.value}",
                    ),
                )

            record.rotate(encrypted_key)
            stored = await self._api_key_repository.save(record)

        except APIKeyInactiveError as e:
            return self._rotation_failure(
                key_id,
                APIKeyResult.failure(APIKeyErrorCode.VALIDATION_ERROR, str(e)),
            )
        except Exception as e:
            return self._rotation_failure(
                key_id,
                APIKeyResult.failure(
                    APIKeyErrorCode.DATABASE_ERROR,
                    "Failed to rotate API key",
                    details={"reason": str(e)},
                ),
            )

        self._probe.api_key_rotated(
            api_key_id=stored.id.value,
            platform=stored.platform_type.value,
        )
        return APIKeyResult.success(stored)

    async def deactivate_key(self, key_id: APIKeyRecordId) -> APIKeyResult[bool]:
        """Take a key out of service without deleting it.

        Deactivating an already inactive key succeeds.

        Args:
            key_id: The record to deactivate

        Returns:
            APIKeyResult with True on success
        """
        try:
            record = await self._api_key_repository.get_by_id(key_id)
            if record is None:
                self._probe.api_key_deactivation_failed(
                    api_key_id=key_id.value,
                    code=APIKeyErrorCode.KEY_NOT_FOUND.value,
                    error="not found",
                )
                return APIKeyResult.failure(
                    APIKeyErrorCode.KEY_NOT_FOUND,
                    f"API key not found: {key_id.value}",
                )

            record.deactivate()
            await self._api_key_repository.save(record)

        except Exception as e:
            self._probe.api_key_deactivation_failed(
                api_key_id=key_id.value,
                code=APIKeyErrorCode.DATABASE_ERROR.value,
                error=str(e),
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.DATABASE_ERROR,
                "Failed to deactivate API key",
                details={"reason": str(e)},
            )

        self._probe.api_key_deactivated(
            api_key_id=key_id.value,
            platform=record.platform_type.value,
        )
        return APIKeyResult.success(True)

    async def list_keys(
        self,
        platform: PlatformType | None = None,
        sort: APIKeySort | None = None,
        direction: SortDirection = SortDirection.ASC,
    ) -> APIKeyResult[list[APIKeyRecord]]:
        """List stored keys, optionally for one platform.

        Records carry ciphertext only, never plaintext.

        Args:
            platform: Optional platform filter
            sort: Optional sort field; without one the store's newest-first
                order is kept
            direction: Direction applied to ``sort``
        """
        platform_value = platform.value if platform else None
        try:
            records = await self._api_key_repository.find(platform_type=platform)
        except Exception as e:
            self._probe.api_key_list_failed(platform=platform_value, error=str(e))
            return APIKeyResult.failure(
                APIKeyErrorCode.DATABASE_ERROR,
                "Failed to list API keys",
                details={"reason": str(e)},
            )

        if sort is not None:
            records = sort_records(records, sort, direction, now=self._clock())

        self._probe.api_keys_listed(platform=platform_value, count=len(records))
        return APIKeyResult.success(records)

    async def get_metrics(
        self, expiring_within: timedelta = DEFAULT_EXPIRING_WITHIN
    ) -> APIKeyResult[list[PlatformKeyMetrics]]:
        """Summarize stored keys per platform as of the service clock.

        Args:
            expiring_within: Look-ahead window for the expiring-soon count

        Returns:
            APIKeyResult with one PlatformKeyMetrics per known platform
        """
        listed = await self.list_keys()
        if listed.error is not None:
            return APIKeyResult(error=listed.error)

        return APIKeyResult.success(
            summarize_keys(
                listed.data or [], now=self._clock(), expiring_within=expiring_within
            )
        )

    async def get_active_key(self, platform: PlatformType) -> APIKeyResult[str]:
        """Return the decrypted active key for a platform.

        Which record is used when several are active is left to the
        repository's ordering (newest first). A successful call counts as a
        use of that record.

        Args:
            platform: The platform to fetch the key for

        Returns:
            APIKeyResult with the plaintext secret. The secret is returned
            to the immediate caller only and never logged.
        """
        loaded = await self._load_active_key(platform)
        if loaded.error is not None:
            return APIKeyResult(error=loaded.error)

        assert loaded.data is not None
        record, plaintext = loaded.data
        record.record_use(self._clock())
        await self._save_usage(record)
        return APIKeyResult.success(plaintext)

    async def validate_key(
        self, platform: PlatformType, presented_key: str
    ) -> KeyValidationResult:
        """Check a presented key against the active stored key for a platform.

        A match counts as a use of the active record and a mismatch as a
        failed use.

        Args:
            platform: The platform the key claims to belong to
            presented_key: The key supplied by the caller

        Returns:
            KeyValidationResult; any lookup error is attached as-is
        """
        presented = _encode_presented_key(presented_key)
        if presented is None:
            return self._invalid_key(platform)

        loaded = await self._load_active_key(platform)
        if loaded.error is not None:
            self._probe.key_validation_failed(
                platform=platform.value, code=loaded.error.code.value
            )
            return KeyValidationResult(is_valid=False, error=loaded.error)

        assert loaded.data is not None
        record, plaintext = loaded.data
        if not hmac.compare_digest(plaintext.encode("utf-8"), presented):
            record.record_failed_use()
            await self._save_usage(record)
            return self._invalid_key(platform)

        record.record_use(self._clock())
        await self._save_usage(record)
        return KeyValidationResult(is_valid=True)

    async def _load_active_key(
        self, platform: PlatformType
    ) -> APIKeyResult[tuple[APIKeyRecord, str]]:
        """Find, check and decrypt the active record for a platform."""
        try:
            records = await self._api_key_repository.find(
                platform_type=platform, is_active=True, limit=1
            )
        except Exception as e:
            self._probe.active_key_unavailable(
                platform=platform.value, code=APIKeyErrorCode.DATABASE_ERROR.value
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.DATABASE_ERROR,
                "Failed to load active API key",
                details={"reason": str(e)},
            )

        if not records:
            self._probe.active_key_unavailable(
                platform=platform.value, code=APIKeyErrorCode.KEY_NOT_FOUND.value
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.KEY_NOT_FOUND,
                f"No active API key found for platform: {platform.value}",
            )

        record = records[0]
        if record.is_expired(self._clock()):
            self._probe.active_key_unavailable(
                platform=platform.value,
                code=APIKeyErrorCode.KEY_EXPIRED.value,
                api_key_id=record.id.value,
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.KEY_EXPIRED,
                f"API key for platform {platform.value} has expired",
                details={"api_key_id": record.id.value},
            )

        try:
            plaintext = self._engine.decrypt(record.encrypted_key)
        except Exception:
            self._probe.active_key_unavailable(
                platform=platform.value,
                code=APIKeyErrorCode.DECRYPTION_FAILED.value,
                api_key_id=record.id.value,
            )
            return APIKeyResult.failure(
                APIKeyErrorCode.DECRYPTION_FAILED,
                "Failed to decrypt API key",
                details={"api_key_id": record.id.value},
            )

        self._probe.active_key_retrieved(
            api_key_id=record.id.value, platform=platform.value
        )
        return APIKeyResult.success((record, plaintext))

    async def _save_usage(self, record: APIKeyRecord) -> None:
        """Persist usage statistics without failing the caller's operation."""
        try:
            await self._api_key_repository.save_metadata(record.id, record.metadata)
        except Exception as e:
            self._probe.key_usage_not_recorded(api_key_id=record.id.value, error=str(e))

    def _invalid_key(self, platform: PlatformType) -> KeyValidationResult:
        self._probe.key_validation_failed(
            platform=platform.value, code=APIKeyErrorCode.INVALID_KEY.value
        )
        return KeyValidationResult(
            is_valid=False,
            error=APIKeyError(code=APIKeyErrorCode.INVALID_KEY, message="Invalid API key"),
        )

    def _validate_key_name(self, name: str) -> str | None:
        """Return an error message when the name violates the length bounds."""
        low = self._config.min_key_name_length
        high = self._config.max_key_name_length
        if not isinstance(name, str) or not (low <= len(name) <= high):
            return f"Key name must be between {low} and {high} characters"
        return None

    def _resolve_expiration(self, expires_at: datetime | None) -> datetime | None:
        """Apply the default lifetime and normalize naive timestamps to UTC."""
        if expires_at is None:
            days = self._config.default_expiration_days
            if days is None:
                return None
            return self._clock() + timedelta(days=days)

        if expires_at.tzinfo is None:
            return expires_at.replace(tzinfo=UTC)
        return expires_at

    def _rotation_failure(
        self, key_id: APIKeyRecordId, result: APIKeyResult[APIKeyRecord]
    ) -> APIKeyResult[APIKeyRecord]:
        assert result.error is not None
        self._probe.api_key_rotation_failed(
            api_key_id=key_id.value,
            code=result.error.code.value,
            error=result.error.message,
        )
        return result
