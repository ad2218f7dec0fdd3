"""Application services for the credentials bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the credentials context.
"""

from credentials.application.services.api_key_service import APIKeyService

__all__ = [
    "APIKeyService",
]
