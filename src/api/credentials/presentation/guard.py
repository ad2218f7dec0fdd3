"""Request guard requiring a valid platform API key.

Attach ``PlatformAPIKeyGuard(platform)`` as a route dependency to reject
requests whose ``X-API-Key`` header does not match the active stored key
for that platform. Install the JSON handler once per application with
``register_api_key_error_handler``.
"""

from typing import Annotated

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.responses import JSONResponse

from credentials.application.services import APIKeyService
from credentials.dependencies.api_key import get_api_key_service
from credentials.domain.value_objects import PlatformType
from credentials.presentation.observability import (
    DefaultKeyValidationProbe,
    KeyValidationProbe,
)


class APIKeyRejectedError(Exception):
    """Raised by the guard to short-circuit a request."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class PlatformAPIKeyGuard:
    """FastAPI dependency validating ``X-API-Key`` for one platform.

    Every request is checked against the store; nothing is cached.
    """

    def __init__(
        self,
        platform: PlatformType,
        probe: KeyValidationProbe | None = None,
    ):
        self._platform = platform
        self._probe = probe or DefaultKeyValidationProbe()

    @property
    def platform(self) -> PlatformType:
        return self._platform

    async def __call__(
        self,
        service: Annotated[APIKeyService, Depends(get_api_key_service)],
        x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    ) -> None:
        """Validate the presented key.

        Raises:
            APIKeyRejectedError: 401 when the key is missing or invalid,
                500 when validation itself fails
        """
        if not x_api_key:
            self._probe.api_key_missing(self._platform.value)
            raise APIKeyRejectedError(
                status.HTTP_401_UNAUTHORIZED, "API key is required"
            )

        try:
            result = await service.validate_key(self._platform, x_api_key)
        except Exception as e:
            self._probe.api_key_validation_errored(self._platform.value, str(e))
            raise APIKeyRejectedError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Error validating API key"
            ) from e

        if not result.is_valid:
            code = "UNKNOWN"
            message = "Invalid API key"
            if result.error is not None:
                code = result.error.code.value
                if result.error.message:
                    message = result.error.message

            self._probe.api_key_rejected(self._platform.value, code)
            raise APIKeyRejectedError(status.HTTP_401_UNAUTHORIZED, message)

        self._probe.api_key_accepted(self._platform.value)


async def _api_key_rejected_handler(
    request: Request, exc: APIKeyRejectedError
) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_api_key_error_handler(app: FastAPI) -> None:
    """Render APIKeyRejectedError as ``{"error": message}``."""
    app.add_exception_handler(APIKeyRejectedError, _api_key_rejected_handler)
