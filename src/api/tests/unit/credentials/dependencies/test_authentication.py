"""Unit tests for admin authentication on the key management routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, create_autospec

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from credentials.application.observability import AdminAuthenticationProbe
from credentials.application.results import APIKeyResult
from credentials.application.services import APIKeyService
from credentials.dependencies.api_key import get_api_key_service
from credentials.dependencies.authentication import get_admin_authentication_probe
from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import PlatformType
from infrastructure.settings import AdminSettings, get_admin_settings

ADMIN_TOKEN = "admin-token"


@pytest.fixture
def mock_api_key_service() -> AsyncMock:
    """Mock APIKeyService for testing."""
    service = AsyncMock(spec=APIKeyService)
    service.add_key.return_value = APIKeyResult.success(
        APIKeyRecord.create(PlatformType.OPENAI, "Production", "ZW52ZWxvcGU=")
    )
    service.list_keys.return_value = APIKeyResult.success([])
    return service


@pytest.fixture
def mock_probe():
    """Create mock admin authentication probe."""
    return create_autospec(AdminAuthenticationProbe, instance=True)


@pytest.fixture
def test_client(mock_api_key_service: AsyncMock, mock_probe) -> TestClient:
    """API key router behind the real admin dependency."""
    from credentials.presentation.api_keys import routes

    app = FastAPI()
    app.dependency_overrides[get_api_key_service] = lambda: mock_api_key_service
    app.dependency_overrides[get_admin_settings] = lambda: AdminSettings(
        token=ADMIN_TOKEN
    )
    app.dependency_overrides[get_admin_authentication_probe] = lambda: mock_probe
    app.include_router(routes.router)
    return TestClient(app)


NEW_KEY = {"platform": "openai", "key": "sk-attacker", "name": "Production"}


class TestRequireAdmin:
    """Tests for the admin bearer token check."""

    def test_unauthenticated_post_is_401(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, mock_probe
    ) -> None:
        """Without credentials no key can be stored."""
        response = test_client.post("/api-keys", json=NEW_KEY)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Not authenticated"}
        assert response.headers["WWW-Authenticate"] == "Bearer"
        mock_api_key_service.add_key.assert_not_called()
        mock_probe.admin_authentication_failed.assert_called_once_with(
            reason="Missing authorization"
        )

    def test_wrong_token_is_401(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, mock_probe
    ) -> None:
        """A bearer token other than the configured one is rejected."""
        response = test_client.post(
            "/api-keys",
            json=NEW_KEY,
            headers={"Authorization": "Bearer not-the-admin-token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Invalid admin token"}
        mock_api_key_service.add_key.assert_not_called()
        mock_probe.admin_authentication_failed.assert_called_once_with(
            reason="Invalid admin token"
        )

    def test_non_bearer_scheme_is_401(
        self, test_client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        """Basic credentials do not count as the admin token."""
        response = test_client.get(
            "/api-keys", headers={"Authorization": f"Basic {ADMIN_TOKEN}"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_api_key_service.list_keys.assert_not_called()

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", "/api-keys"),
            ("get", "/api-keys/metrics"),
            ("put", "/api-keys/01ARZ3NDEKTSV4RRFFQ69G5FAV/rotate"),
            ("delete", "/api-keys/01ARZ3NDEKTSV4RRFFQ69G5FAV"),
        ],
    )
    def test_every_management_route_requires_token(
        self, test_client: TestClient, method: str, path: str
    ) -> None:
        """Reads, rotations and deactivations are protected as well."""
        response = test_client.request(method, path, json={"key": "sk-new"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_admin_token_passes(
        self, test_client: TestClient, mock_api_key_service: AsyncMock, mock_probe
    ) -> None:
        """The configured token lets the request reach the service."""
        response = test_client.post(
            "/api-keys",
            json=NEW_KEY,
            headers={"Authorization": f"Bearer {ADMIN_TOKEN}"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        mock_api_key_service.add_key.assert_awaited_once()
        mock_probe.admin_authenticated.assert_called_once_with()
