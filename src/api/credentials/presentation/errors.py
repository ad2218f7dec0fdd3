"""Mapping of API key service errors onto HTTP responses."""

from __future__ import annotations

from fastapi import status
from fastapi.responses import JSONResponse

from credentials.application.results import APIKeyError, APIKeyErrorCode

ERROR_STATUS_CODES: dict[APIKeyErrorCode, int] = {
    APIKeyErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_CONTENT,
    APIKeyErrorCode.KEY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    APIKeyErrorCode.KEY_EXPIRED: status.HTTP_410_GONE,
    APIKeyErrorCode.INVALID_KEY: status.HTTP_401_UNAUTHORIZED,
    APIKeyErrorCode.ENCRYPTION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    APIKeyErrorCode.DECRYPTION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    APIKeyErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: APIKeyError) -> JSONResponse:
    """Render a service error as ``{"error": {"code", "message"}}``.

    Diagnostics in ``details`` stay server-side.
    """
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        content={"error": error.as_dict(include_details=False)},
    )


def invalid_id_response() -> JSONResponse:
    """Render a malformed path identifier as a validation error."""
    return error_response(
        APIKeyError(
            code=APIKeyErrorCode.VALIDATION_ERROR,
            message="Invalid API key ID format",
        )
    )
