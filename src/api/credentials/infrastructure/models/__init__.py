"""SQLAlchemy ORM models for the credentials bounded context.

These models map to database tables and are used by repository implementations.
"""

from credentials.infrastructure.models.api_key_record import APIKeyRecordModel

__all__ = [
    "APIKeyRecordModel",
]
