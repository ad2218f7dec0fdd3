"""Unit test fixtures with mocked or in-memory dependencies."""

from datetime import UTC, datetime

import pytest

TEST_MASTER_KEY = "unit-test-master-key"


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def encryption_engine():
    """Provide an encryption engine bound to a test master key."""
    from shared_kernel.encryption import EncryptionEngine

    return EncryptionEngine(TEST_MASTER_KEY)


@pytest.fixture
def memory_repository():
    """Provide an empty in-memory API key record store."""
    from credentials.infrastructure.memory_repository import (
        InMemoryAPIKeyRecordRepository,
    )

    return InMemoryAPIKeyRecordRepository()


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed point in time used as the service clock."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
