"""Unit tests for API key management HTTP routes."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from credentials.application.metrics import PlatformKeyMetrics
from credentials.application.results import APIKeyErrorCode, APIKeyResult
from credentials.application.services import APIKeyService
from credentials.dependencies.api_key import get_api_key_service
from credentials.domain.aggregates import APIKeyRecord
from credentials.dependencies.authentication import require_admin
from credentials.domain.value_objects import (
    APIKeyRecordId,
    APIKeySort,
    PlatformType,
    SortDirection,
)
from infrastructure.settings import APIKeySettings, get_api_key_settings


@pytest.fixture
def mock_api_key_service() -> AsyncMock:
    """Mock APIKeyService for testing."""
    return AsyncMock(spec=APIKeyService)


@pytest.fixture
def sample_record() -> APIKeyRecord:
    """An active OpenAI key record."""
    return APIKeyRecord.create(
        platform_type=PlatformType.OPENAI,
        key_name="Production",
        encrypted_key="c2VhbGVkLWVudmVsb3Bl",
    )


@pytest.fixture
def test_client(mock_api_key_service: AsyncMock) -> TestClient:
    """Create TestClient with the API key router and a mocked service."""
    from credentials.presentation.api_keys import routes

    app = FastAPI()
    app.dependency_overrides[require_admin] = lambda: None
    app.dependency_overrides[get_api_key_service] = lambda: mock_api_key_service
    app.dependency_overrides[get_api_key_settings] = lambda: APIKeySettings(
        expiring_soon_days=14
    )
    app.include_router(routes.router)
    return TestClient(app)


class TestAddAPIKeyRoute:
    """Tests for POST /api-keys."""

    def test_returns_201_with_record(
        self,
        test_client: TestClient,
        mock_api_key_service: AsyncMock,
        sample_record: APIKeyRecord,
    ) -> None:
        """A stored key is returned without any key material."""
        mock_api_key_service.add_key.return_value = APIKeyResult.success(
            sample_record
        )

        response = test_client.post(
            "/api-keys",
            json={"platform": "openai", "key": "sk-secret", "name": "Production"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == sample_record.id.value
        assert body["platform"] == "openai"
        assert body["key_name"] == "Production"
        assert body["is_active"] is True
        assert body["has_expiration"] is False
        assert body["is_expired"] is False
        assert "key" not in body
        assert "encrypted_key" not in body
        assert "sk-secret" not in response.text
        assert sample_record.encrypted_key not in response.text

    def test_passes_request_to_service(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, sample_record
    ) -> None:
        mock_api_key_service.add_key.return_value = APIKeyResult.success(
            sample_record
        )

        test_client.post(
            "/api-keys",
            json={
                "platform": "openai",
                "key": "sk-secret",
                "name": "Production",
                "expires_at": "2030-01-01T00:00:00Z",
            },
        )

        kwargs = mock_api_key_service.add_key.call_args.kwargs
        assert kwargs["platform"] == PlatformType.OPENAI
        assert kwargs["raw_key"] == "sk-secret"
        assert kwargs["name"] == "Production"
        assert kwargs["expires_at"] == datetime(2030, 1, 1, tzinfo=UTC)

    def test_validation_error_returns_422(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        mock_api_key_service.add_key.return_value = APIKeyResult.failure(
            APIKeyErrorCode.VALIDATION_ERROR,
            "Key name must be between 3 and 50 characters",
        )

        response = test_client.post(
            "/api-keys", json={"platform": "openai", "key": "sk", "name": "ab"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json() == {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Key name must be between 3 and 50 characters",
            }
        }

    def test_database_error_hides_details(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        """Driver diagnostics never reach the client."""
        mock_api_key_service.add_key.return_value = APIKeyResult.failure(
            APIKeyErrorCode.DATABASE_ERROR,
            "Failed to store API key",
            details={"reason": "connection refused"},
        )

        response = test_client.post(
            "/api-keys", json={"platform": "openai", "key": "sk", "name": "Prod"}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"]["code"] == "DATABASE_ERROR"
        assert "details" not in response.json()["error"]

    def test_unknown_platform_is_rejected_by_schema(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        response = test_client.post(
            "/api-keys", json={"platform": "myspace", "key": "sk", "name": "Prod"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        mock_api_key_service.add_key.assert_not_called()


class TestListAPIKeysRoute:
    """Tests for GET /api-keys."""

    def test_lists_all_keys(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, sample_record
    ) -> None:
        mock_api_key_service.list_keys.return_value = APIKeyResult.success(
            [sample_record]
        )

        response = test_client.get("/api-keys")

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.json()] == [sample_record.id.value]
        mock_api_key_service.list_keys.assert_awaited_once_with(
            None, sort=None, direction=SortDirection.ASC
        )

    def test_filters_by_platform(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        mock_api_key_service.list_keys.return_value = APIKeyResult.success([])

        response = test_client.get("/api-keys", params={"platform": "twitter"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []
        mock_api_key_service.list_keys.assert_awaited_once_with(
            PlatformType.TWITTER, sort=None, direction=SortDirection.ASC
        )

    def test_flags_expired_keys(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        expired = APIKeyRecord.create(
            platform_type=PlatformType.LINKEDIN,
            key_name="Old",
            encrypted_key="ZW52ZWxvcGU=",
            expires_at=datetime.now(UTC) - timedelta(days=1),
        )
        mock_api_key_service.list_keys.return_value = APIKeyResult.success([expired])

        response = test_client.get("/api-keys")

        item = response.json()[0]
        assert item["has_expiration"] is True
        assert item["is_expired"] is True
        assert item["is_active"] is True

    def test_passes_sort_to_service(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        mock_api_key_service.list_keys.return_value = APIKeyResult.success([])

        response = test_client.get(
            "/api-keys", params={"sort": "expires", "direction": "desc"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_api_key_service.list_keys.assert_awaited_once_with(
            None, sort=APIKeySort.EXPIRES, direction=SortDirection.DESC
        )

    def test_unknown_sort_is_rejected_by_schema(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        response = test_client.get("/api-keys", params={"sort": "secret"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        mock_api_key_service.list_keys.assert_not_called()

    def test_exposes_usage(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, sample_record
    ) -> None:
        used_at = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        for _ in range(3):
            sample_record.record_use(used_at)
        sample_record.record_failed_use()
        mock_api_key_service.list_keys.return_value = APIKeyResult.success(
            [sample_record]
        )

        item = test_client.get("/api-keys").json()[0]

        assert item["usage_count"] == 3
        assert item["error_rate"] == 0.25
        assert datetime.fromisoformat(item["last_used_at"]) == used_at

    def test_unused_key_has_no_last_use(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, sample_record
    ) -> None:
        mock_api_key_service.list_keys.return_value = APIKeyResult.success(
            [sample_record]
        )

        item = test_client.get("/api-keys").json()[0]

        assert item["last_used_at"] is None
        assert item["usage_count"] == 0
        assert item["error_rate"] == 0.0

    def test_list_failure_returns_500(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        mock_api_key_service.list_keys.return_value = APIKeyResult.failure(
            APIKeyErrorCode.DATABASE_ERROR, "Failed to list API keys"
        )

        response = test_client.get("/api-keys")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "error": {"code": "DATABASE_ERROR", "message": "Failed to list API keys"}
        }


class TestRotateAPIKeyRoute:
    """Tests for PUT /api-keys/{id}/rotate."""

    def test_rotates_key(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, sample_record
    ) -> None:
        mock_api_key_service.rotate_key.return_value = APIKeyResult.success(
            sample_record
        )

        response = test_client.put(
            f"/api-keys/{sample_record.id.value}/rotate", json={"key": "sk-new"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == sample_record.id.value
        assert "sk-new" not in response.text
        mock_api_key_service.rotate_key.assert_awaited_once_with(
            sample_record.id, "sk-new"
        )

    def test_invalid_id_returns_422_without_calling_service(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        response = test_client.put("/api-keys/not-a-ulid/rotate", json={"key": "k"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json() == {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid API key ID format",
            }
        }
        mock_api_key_service.rotate_key.assert_not_called()

    def test_unknown_key_returns_404(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        key_id = APIKeyRecordId.generate()
        mock_api_key_service.rotate_key.return_value = APIKeyResult.failure(
            APIKeyErrorCode.KEY_NOT_FOUND, f"API key not found: {key_id.value}"
        )

        response = test_client.put(
            f"/api-keys/{key_id.value}/rotate", json={"key": "sk-new"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "KEY_NOT_FOUND"


class TestDeactivateAPIKeyRoute:
    """Tests for DELETE /api-keys/{id}."""

    def test_deactivates_key(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        key_id = APIKeyRecordId.generate()
        mock_api_key_service.deactivate_key.return_value = APIKeyResult.success(True)

        response = test_client.delete(f"/api-keys/{key_id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"deactivated": True}
        mock_api_key_service.deactivate_key.assert_awaited_once_with(key_id)

    def test_invalid_id_returns_422(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        response = test_client.delete("/api-keys/bogus")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        mock_api_key_service.deactivate_key.assert_not_called()

    def test_unknown_key_returns_404(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        key_id = APIKeyRecordId.generate()
        mock_api_key_service.deactivate_key.return_value = APIKeyResult.failure(
            APIKeyErrorCode.KEY_NOT_FOUND, f"API key not found: {key_id.value}"
        )

        response = test_client.delete(f"/api-keys/{key_id.value}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAPIKeyMetricsRoute:
    """Tests for GET /api-keys/metrics."""

    def test_returns_metrics_with_configured_window(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        mock_api_key_service.get_metrics.return_value = APIKeyResult.success(
            [
                PlatformKeyMetrics(
                    platform=PlatformType.OPENAI, total=3, active=1, inactive=1,
                    expired=1, expiring_soon=1,
                )
            ]
        )

        response = test_client.get("/api-keys/metrics")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "expiring_within_days": 14,
            "platforms": [
                {
                    "platform": "openai",
                    "total": 3,
                    "active": 1,
                    "inactive": 1,
                    "expired": 1,
                    "expiring_soon": 1,
                }
            ],
        }
        mock_api_key_service.get_metrics.assert_awaited_once_with(
            expiring_within=timedelta(days=14)
        )
