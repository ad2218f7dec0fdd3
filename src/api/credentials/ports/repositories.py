"""Repository protocols (ports) for the credentials bounded context.

The API key service depends only on this shape, never on a specific
backend. Any transactional store satisfies it: the SQLAlchemy
implementation for production and the in-memory one for tests.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeyRecordId, PlatformType


@runtime_checkable
class IAPIKeyRecordRepository(Protocol):
    """Repository for APIKeyRecord aggregate persistence.

    Implementations raise APIKeyStoreError for any backend failure.
    """

    async def save(self, record: APIKeyRecord) -> APIKeyRecord:
        """Persist an API key record.

        Inserts a new record or updates an existing one by ID.

        Args:
            record: The APIKeyRecord aggregate to persist

        Returns:
            The stored record, with store-maintained timestamps applied

        Raises:
            APIKeyStoreError: If the store rejects the write
        """
        ...

    async def save_metadata(
        self, record_id: APIKeyRecordId, metadata: dict[str, Any] | None
    ) -> None:
        """Replace only the metadata of an existing record.

        Leaves the key material, status and timestamps untouched so that
        usage bookkeeping never overwrites a concurrent rotation.

        Raises:
            APIKeyStoreError: If the store rejects the write
        """
        ...

    async def get_by_id(self, record_id: APIKeyRecordId) -> APIKeyRecord | None:
        """Retrieve a record by its ID.

        Args:
            record_id: The unique identifier of the record

        Returns:
            The APIKeyRecord aggregate, or None if not found
        """
        ...

    async def find(
        self,
        platform_type: PlatformType | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
    ) -> list[APIKeyRecord]:
        """List records matching equality filters.

        Filters are combined with AND logic. Results are ordered newest
        first by ``created_at``.

        Args:
            platform_type: Optional platform filter
            is_active: Optional activity filter
            limit: Optional maximum number of records to return

        Returns:
            List of APIKeyRecord aggregates matching all provided filters
        """
        ...

    async def count(self, platform_type: PlatformType) -> int:
        """Count all records stored for a platform, active or not.

        Args:
            platform_type: The platform to count records for

        Returns:
            Number of records
        """
        ...
