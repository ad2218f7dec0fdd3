"""Ports for the credentials bounded context."""

from credentials.ports.exceptions import APIKeyInactiveError, APIKeyStoreError
from credentials.ports.repositories import IAPIKeyRecordRepository

__all__ = [
    "APIKeyInactiveError",
    "APIKeyStoreError",
    "IAPIKeyRecordRepository",
]
