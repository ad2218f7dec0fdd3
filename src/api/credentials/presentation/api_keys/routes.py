"""HTTP routes for platform API key management."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from credentials.application.services import APIKeyService
from credentials.dependencies.api_key import get_api_key_service
from credentials.dependencies.authentication import require_admin
from credentials.domain.value_objects import (
    APIKeyRecordId,
    APIKeySort,
    PlatformType,
    SortDirection,
)
from credentials.presentation.api_keys.models import (
    AddAPIKeyRequest,
    APIKeyMetricsResponse,
    APIKeyRecordResponse,
    DeactivateAPIKeyResponse,
    PlatformKeyMetricsResponse,
    RotateAPIKeyRequest,
)
from credentials.presentation.errors import error_response, invalid_id_response
from infrastructure.settings import APIKeySettings, get_api_key_settings

router = APIRouter(
    prefix="/api-keys",
    tags=["api-keys"],
    dependencies=[Depends(require_admin)],
)

_ERROR_RESPONSES: dict[int | str, dict] = {
    401: {"description": "Admin token missing or invalid"},
    404: {"description": "API key not found"},
    410: {"description": "API key has expired"},
    422: {"description": "Validation error"},
    500: {"description": "Encryption or storage failure"},
}


def _now() -> datetime:
    return datetime.now(UTC)


@router.post(
    "",
    response_model=APIKeyRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def add_api_key(
    request: AddAPIKeyRequest,
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> APIKeyRecordResponse | JSONResponse:
    """Encrypt and store a new API key for a platform.

    The raw key is never echoed back; only the record metadata is returned.

    Args:
        request: Platform, raw key, name and optional expiration
        service: API key service for orchestration

    Returns:
        APIKeyRecordResponse for the new record, or an error response
    """
    result = await service.add_key(
        platform=request.platform,
        raw_key=request.key,
        name=request.name,
        expires_at=request.expires_at,
    )
    if result.error is not None:
        return error_response(result.error)

    assert result.data is not None
    return APIKeyRecordResponse.from_domain(result.data, _now())


@router.get(
    "",
    response_model=list[APIKeyRecordResponse],
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def list_api_keys(
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
    platform: PlatformType | None = None,
    sort: APIKeySort | None = None,
    direction: SortDirection = SortDirection.ASC,
) -> list[APIKeyRecordResponse] | JSONResponse:
    """List stored API keys, newest first unless a sort is given.

    Args:
        service: API key service for orchestration
        platform: Optional platform filter
        sort: Optional field to order by instead of creation time
        direction: Order for ``sort``, ascending by default

    Returns:
        List of APIKeyRecordResponse objects (without key material)
    """
    result = await service.list_keys(platform, sort=sort, direction=direction)
    if result.error is not None:
        return error_response(result.error)

    now = _now()
    return [
        APIKeyRecordResponse.from_domain(record, now) for record in result.data or []
    ]


@router.get(
    "/metrics",
    response_model=APIKeyMetricsResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def get_api_key_metrics(
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
    settings: Annotated[APIKeySettings, Depends(get_api_key_settings)],
) -> APIKeyMetricsResponse | JSONResponse:
    """Summarize stored keys per platform for the key dashboard."""
    result = await service.get_metrics(
        expiring_within=timedelta(days=settings.expiring_soon_days)
    )
    if result.error is not None:
        return error_response(result.error)

    return APIKeyMetricsResponse(
        expiring_within_days=settings.expiring_soon_days,
        platforms=[
            PlatformKeyMetricsResponse.from_domain(metrics)
            for metrics in result.data or []
        ],
    )


@router.put(
    "/{api_key_id}/rotate",
    response_model=APIKeyRecordResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def rotate_api_key(
    api_key_id: str,
    request: RotateAPIKeyRequest,
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> APIKeyRecordResponse | JSONResponse:
    """Replace the secret of a stored key in place.

    Args:
        api_key_id: API key record ID (ULID format)
        request: The new raw key
        service: API key service for orchestration

    Returns:
        APIKeyRecordResponse for the rotated record, or an error response
    """
    try:
        key_id = APIKeyRecordId.from_string(api_key_id)
    except ValueError:
        return invalid_id_response()

    result = await service.rotate_key(key_id, request.key)
    if result.error is not None:
        return error_response(result.error)

    assert result.data is not None
    return APIKeyRecordResponse.from_domain(result.data, _now())


@router.delete(
    "/{api_key_id}",
    response_model=DeactivateAPIKeyResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def deactivate_api_key(
    api_key_id: str,
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> DeactivateAPIKeyResponse | JSONResponse:
    """Deactivate a stored key.

    The record is kept for audit with is_active=false. Deactivating an
    already inactive key succeeds.

    Args:
        api_key_id: API key record ID (ULID format)
        service: API key service for orchestration
    """
    try:
        key_id = APIKeyRecordId.from_string(api_key_id)
    except ValueError:
        return invalid_id_response()

    result = await service.deactivate_key(key_id)
    if result.error is not None:
        return error_response(result.error)

    return DeactivateAPIKeyResponse(deactivated=True)
