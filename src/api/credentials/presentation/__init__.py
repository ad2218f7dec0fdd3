"""Credentials presentation layer - aggregate-based organization.

Each package holds its own routes and models: ``api_keys`` for key
management and ``platforms`` for routes gated by a platform API key.
"""

from __future__ import annotations

from fastapi import APIRouter

from credentials.presentation.api_keys.routes import router as api_keys_router
from credentials.presentation.guard import (
    APIKeyRejectedError,
    PlatformAPIKeyGuard,
    register_api_key_error_handler,
)
from credentials.presentation.platforms.routes import router as platforms_router

router = APIRouter()

router.include_router(api_keys_router)
router.include_router(platforms_router)

__all__ = [
    "APIKeyRejectedError",
    "PlatformAPIKeyGuard",
    "register_api_key_error_handler",
    "router",
]
