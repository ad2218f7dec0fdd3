"""Domain-Oriented Observability for the credentials infrastructure layer."""

from credentials.infrastructure.observability.api_key_repository_probe import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)

__all__ = [
    "APIKeyRepositoryProbe",
    "DefaultAPIKeyRepositoryProbe",
]
