import hmac
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from credentials.application.observability import (
    AdminAuthenticationProbe,
    DefaultAdminAuthenticationProbe,
)
from infrastructure.settings import AdminSettings, get_admin_settings

# Bearer scheme for Swagger UI; missing credentials are handled below
admin_bearer_scheme = HTTPBearer(auto_error=False)


def get_admin_authentication_probe() -> AdminAuthenticationProbe:
    """Get AdminAuthenticationProbe instance.

    Returns:
        DefaultAdminAuthenticationProbe instance for observability
    """
    return DefaultAdminAuthenticationProbe()


async def require_admin(
    settings: Annotated[AdminSettings, Depends(get_admin_settings)],
    probe: Annotated[AdminAuthenticationProbe, Depends(get_admin_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(admin_bearer_scheme)
    ] = None,
) -> None:
    """Require the operator bearer token on key management routes.

    Args:
        settings: Holds the expected admin token
        probe: Authentication probe for observability
        credentials: Parsed ``Authorization: Bearer`` header, if any

    Raises:
        HTTPException 401: If the token is missing or does not match
    """
    if credentials is None:
        probe.admin_authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    expected = settings.token.get_secret_value().encode("utf-8")
    presented = credentials.credentials.encode("utf-8", errors="replace")
    if not hmac.compare_digest(expected, presented):
        probe.admin_authentication_failed(reason="Invalid admin token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    probe.admin_authenticated()
