"""Domain aggregates for the credentials context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from credentials.domain.aggregates.api_key_record import APIKeyRecord

__all__ = [
    "APIKeyRecord",
]
