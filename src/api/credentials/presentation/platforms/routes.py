"""HTTP routes gated by a platform API key.

One connection-check route is registered per platform, each behind a
PlatformAPIKeyGuard for that platform.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, status

from credentials.domain.value_objects import PlatformType
from credentials.presentation.guard import PlatformAPIKeyGuard
from credentials.presentation.platforms.models import PlatformConnectionResponse

router = APIRouter(
    prefix="/platforms",
    tags=["platforms"],
)

_UNAUTHORIZED = {401: {"description": "API key missing or invalid"}}


def _connection_endpoint(
    platform: PlatformType,
) -> Callable[[], Awaitable[PlatformConnectionResponse]]:
    async def check_connection() -> PlatformConnectionResponse:
        return PlatformConnectionResponse(platform=platform, connected=True)

    check_connection.__doc__ = (
        f"Confirm that the presented X-API-Key is valid for {platform.value}."
    )
    return check_connection


for _platform in PlatformType:
    router.add_api_route(
        f"/{_platform.value}/connection",
        _connection_endpoint(_platform),
        methods=["GET"],
        response_model=PlatformConnectionResponse,
        status_code=status.HTTP_200_OK,
        dependencies=[Depends(PlatformAPIKeyGuard(_platform))],
        responses=_UNAUTHORIZED,
        name=f"check_{_platform.value}_connection",
    )
