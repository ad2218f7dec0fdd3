"""Domain layer for the credentials bounded context."""

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeyRecordId, PlatformType

__all__ = [
    "APIKeyRecord",
    "APIKeyRecordId",
    "PlatformType",
]
