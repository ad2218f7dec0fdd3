"""Pydantic models for API key requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from credentials.application.metrics import PlatformKeyMetrics
from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import PlatformType


class AddAPIKeyRequest(BaseModel):
    """Request model for storing a platform API key.

    Name and key rules are enforced by the service so that violations are
    reported in the same error shape as every other API key failure.
    """

    platform: PlatformType = Field(..., description="Platform the key belongs to")
    key: str = Field(..., description="The raw API key. Stored encrypted only.")
    name: str = Field(..., description="Descriptive name for the key")
    expires_at: datetime | None = Field(
        None, description="Optional expiration; naive values are read as UTC"
    )


class RotateAPIKeyRequest(BaseModel):
    """Request model for replacing the secret of a stored key."""

    key: str = Field(..., description="The new raw API key")


class APIKeyRecordResponse(BaseModel):
    """Response model for a stored API key.

    Neither the raw key nor its ciphertext is ever returned.
    """

    id: str = Field(..., description="API key record ID (ULID format)")
    platform: PlatformType = Field(..., description="Platform the key belongs to")
    key_name: str = Field(..., description="Descriptive name")
    is_active: bool = Field(..., description="Whether the key is in service")
    has_expiration: bool = Field(..., description="Whether an expiration is set")
    is_expired: bool = Field(..., description="Whether the key has expired")
    expires_at: datetime | None = Field(None, description="When the key expires")
    created_at: datetime = Field(..., description="When the key was stored")
    updated_at: datetime = Field(..., description="When the key was last changed")
    last_used_at: datetime | None = Field(
        None, description="When the key last served or matched a request"
    )
    usage_count: int = Field(0, description="Successful uses recorded")
    error_rate: float = Field(
        0.0, description="Share of presented keys that failed to match"
    )
    metadata: dict[str, Any] | None = Field(None, description="Free-form metadata")

    @classmethod
    def from_domain(cls, record: APIKeyRecord, now: datetime) -> APIKeyRecordResponse:
        """Convert domain APIKeyRecord aggregate to API response.

        Args:
            record: APIKeyRecord domain aggregate
            now: Reference time for the expiration flag

        Returns:
            APIKeyRecordResponse (without key material)
        """
        return cls(
            id=record.id.value,
            platform=record.platform_type,
            key_name=record.key_name,
            is_active=record.is_active,
            has_expiration=record.expires_at is not None,
            is_expired=record.is_expired(now),
            expires_at=record.expires_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
            last_used_at=record.last_used_at,
            usage_count=record.usage_count,
            error_rate=record.error_rate,
            metadata=record.metadata,
        )


class DeactivateAPIKeyResponse(BaseModel):
    """Response model for a soft delete."""

    deactivated: bool = Field(..., description="Always true on success")


class PlatformKeyMetricsResponse(BaseModel):
    """Key counts for one platform."""

    platform: PlatformType
    total: int
    active: int
    inactive: int
    expired: int
    expiring_soon: int

    @classmethod
    def from_domain(cls, metrics: PlatformKeyMetrics) -> PlatformKeyMetricsResponse:
        return cls(
            platform=metrics.platform,
            total=metrics.total,
            active=metrics.active,
            inactive=metrics.inactive,
            expired=metrics.expired,
            expiring_soon=metrics.expiring_soon,
        )


class APIKeyMetricsResponse(BaseModel):
    """Response model for the key dashboard summary."""

    expiring_within_days: int = Field(
        ..., description="Look-ahead window used for expiring_soon"
    )
    platforms: list[PlatformKeyMetricsResponse]
