"""In-memory implementation of IAPIKeyRecordRepository.

Used by tests and local development. Records are copied on the way in and
out so callers cannot mutate stored state without going through ``save``.
"""

from __future__ import annotations

import copy
from typing import Any

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeyRecordId, PlatformType
from credentials.infrastructure.observability import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)
from credentials.ports.exceptions import APIKeyStoreError
from credentials.ports.repositories import IAPIKeyRecordRepository


class InMemoryAPIKeyRecordRepository(IAPIKeyRecordRepository):
    """Dictionary-backed API key record store.

    Enforces the same per-platform key name uniqueness as the database.
    """

    def __init__(self, probe: APIKeyRepositoryProbe | None = None) -> None:
        self._records: dict[str, APIKeyRecord] = {}
        self._probe = probe or DefaultAPIKeyRepositoryProbe()

    async def save(self, record: APIKeyRecord) -> APIKeyRecord:
        for existing in self._records.values():
            if (
                existing.id != record.id
                and existing.platform_type == record.platform_type
                and existing.key_name == record.key_name
            ):
                self._probe.duplicate_key_name(
                    record.platform_type.value, record.key_name
                )
                raise APIKeyStoreError(
                    f"API key '{record.key_name}' already exists for platform "
                    f"{record.platform_type.value}"
                )

        self._records[record.id.value] = copy.deepcopy(record)
        self._probe.api_key_saved(record.id.value, record.platform_type.value)
        return copy.deepcopy(record)

    async def save_metadata(
        self, record_id: APIKeyRecordId, metadata: dict[str, Any] | None
    ) -> None:
        record = self._records.get(record_id.value)
        if record is not None:
            record.metadata = copy.deepcopy(metadata)

    async def get_by_id(self, record_id: APIKeyRecordId) -> APIKeyRecord | None:
        record = self._records.get(record_id.value)
        if record is None:
            self._probe.api_key_not_found(record_id.value)
            return None

        self._probe.api_key_retrieved(record_id.value)
        return copy.deepcopy(record)

    async def find(
        self,
        platform_type: PlatformType | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
    ) -> list[APIKeyRecord]:
        matches = [
            record
            for record in self._records.values()
            if (platform_type is None or record.platform_type == platform_type)
            and (is_active is None or record.is_active == is_active)
        ]
        matches.sort(key=lambda r: (r.created_at, r.id.value), reverse=True)
        if limit is not None:
            matches = matches[:limit]

        self._probe.api_keys_found(
            platform_type.value if platform_type else None, len(matches)
        )
        return [copy.deepcopy(record) for record in matches]

    async def count(self, platform_type: PlatformType) -> int:
        return sum(
            1
            for record in self._records.values()
            if record.platform_type == platform_type
        )
