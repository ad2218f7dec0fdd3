"""Domain-Oriented Observability for the credentials presentation layer."""

from credentials.presentation.observability.key_validation_probe import (
    DefaultKeyValidationProbe,
    KeyValidationProbe,
)

__all__ = [
    "DefaultKeyValidationProbe",
    "KeyValidationProbe",
]
