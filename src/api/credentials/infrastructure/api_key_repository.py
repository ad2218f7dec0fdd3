"""PostgreSQL implementation of IAPIKeyRecordRepository.

This repository handles persistence of API key records to PostgreSQL.
Only the encryption envelope is stored; the raw secret never reaches
the database.

Each ``save`` runs in its own transaction and commits before returning,
so a successful result from the service means the row is durable.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeyRecordId, PlatformType
from credentials.infrastructure.models import APIKeyRecordModel
from credentials.infrastructure.observability import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)
from credentials.ports.exceptions import APIKeyStoreError
from credentials.ports.repositories import IAPIKeyRecordRepository


class APIKeyRecordRepository(IAPIKeyRecordRepository):
    """Repository for APIKeyRecord aggregate persistence to PostgreSQL.

    Driver and constraint errors are wrapped in APIKeyStoreError so the
    application layer never sees SQLAlchemy types.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: APIKeyRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultAPIKeyRepositoryProbe()

    async def save(self, record: APIKeyRecord) -> APIKeyRecord:
        """Persist an API key record to PostgreSQL.

        Args:
            record: The APIKeyRecord aggregate to persist

        Returns:
            The stored record as read back from its row

        Raises:
            APIKeyStoreError: If the write or commit fails
        """
        try:
            # Check if the record already exists (upsert pattern)
            stmt = select(APIKeyRecordModel).where(
                APIKeyRecordModel.id == record.id.value
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model:
                # Platform and name are fixed at creation
                model.encrypted_key = record.encrypted_key
                model.is_active = record.is_active
                model.expires_at = record.expires_at
                model.key_metadata = record.metadata
                model.updated_at = record.updated_at
            else:
                model = APIKeyRecordModel(
                    id=record.id.value,
                    platform_type=record.platform_type.value,
                    key_name=record.key_name,
                    encrypted_key=record.encrypted_key,
                    is_active=record.is_active,
                    expires_at=record.expires_at,
                    key_metadata=record.metadata,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
                self._session.add(model)

            await self._session.flush()
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            self._probe.duplicate_key_name(
                record.platform_type.value, record.key_name
            )
            raise APIKeyStoreError(
                f"API key '{record.key_name}' already exists for platform "
                f"{record.platform_type.value}"
            ) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._probe.store_operation_failed("save", str(e))
            raise APIKeyStoreError(str(e)) from e

        self._probe.api_key_saved(record.id.value, record.platform_type.value)
        return self._to_aggregate(model)

    async def save_metadata(
        self, record_id: APIKeyRecordId, metadata: dict[str, Any] | None
    ) -> None:
        """Overwrite the metadata column of one row and commit.

        Raises:
            APIKeyStoreError: If the update or commit fails
        """
        stmt = (
            update(APIKeyRecordModel)
            .where(APIKeyRecordModel.id == record_id.value)
            # Assigning updated_at to itself suppresses its onupdate default
            .values(key_metadata=metadata, updated_at=APIKeyRecordModel.updated_at)
        )
        try:
            await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._probe.store_operation_failed("save_metadata", str(e))
            raise APIKeyStoreError(str(e)) from e

    async def get_by_id(self, record_id: APIKeyRecordId) -> APIKeyRecord | None:
        """Retrieve an API key record by ID.

        Args:
            record_id: The unique identifier of the record

        Returns:
            The APIKeyRecord aggregate, or None if not found

        Raises:
            APIKeyStoreError: If the query fails
        """
        stmt = select(APIKeyRecordModel).where(APIKeyRecordModel.id == record_id.value)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._probe.store_operation_failed("get_by_id", str(e))
            raise APIKeyStoreError(str(e)) from e

        model = result.scalar_one_or_none()
        if model is None:
            self._probe.api_key_not_found(record_id.value)
            return None

        self._probe.api_key_retrieved(record_id.value)
        return self._to_aggregate(model)

    async def find(
        self,
        platform_type: PlatformType | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
    ) -> list[APIKeyRecord]:
        """List API key records with optional filters, newest first.

        Ties on ``created_at`` are broken by ID, which is a ULID and so
        sorts by generation time as well.

        Args:
            platform_type: Optional platform filter
            is_active: Optional activity filter
            limit: Optional maximum number of records to return

        Returns:
            List of APIKeyRecord aggregates matching all provided filters

        Raises:
            APIKeyStoreError: If the query fails
        """
        stmt = select(APIKeyRecordModel)

        conditions = self._conditions(platform_type, is_active)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        stmt = stmt.order_by(
            APIKeyRecordModel.created_at.desc(), APIKeyRecordModel.id.desc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._probe.store_operation_failed("find", str(e))
            raise APIKeyStoreError(str(e)) from e

        records = [self._to_aggregate(model) for model in result.scalars().all()]
        self._probe.api_keys_found(
            platform_type.value if platform_type else None, len(records)
        )
        return records

    async def count(self, platform_type: PlatformType) -> int:
        """Count all records stored for a platform.

        Args:
            platform_type: The platform to count records for

        Returns:
            Number of records, active or not

        Raises:
            APIKeyStoreError: If the query fails
        """
        stmt = (
            select(func.count())
            .select_from(APIKeyRecordModel)
            .where(APIKeyRecordModel.platform_type == platform_type.value)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._probe.store_operation_failed("count", str(e))
            raise APIKeyStoreError(str(e)) from e

        return int(result.scalar_one())

    def _conditions(
        self, platform_type: PlatformType | None, is_active: bool | None
    ) -> list:
        conditions = []

        if platform_type is not None:
            conditions.append(APIKeyRecordModel.platform_type == platform_type.value)

        if is_active is not None:
            conditions.append(APIKeyRecordModel.is_active == is_active)

        return conditions

    def _to_aggregate(self, model: APIKeyRecordModel) -> APIKeyRecord:
        """Convert SQLAlchemy model to domain aggregate.

        Args:
            model: The APIKeyRecordModel to convert

        Returns:
            The APIKeyRecord domain aggregate
        """
        return APIKeyRecord(
            id=APIKeyRecordId(value=model.id),
            platform_type=PlatformType(model.platform_type),
            key_name=model.key_name,
            encrypted_key=model.encrypted_key,
            created_at=model.created_at,
            updated_at=model.updated_at,
            is_active=model.is_active,
            expires_at=model.expires_at,
            metadata=model.key_metadata,
        )
