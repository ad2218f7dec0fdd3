from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from credentials.application.config import APIKeyServiceConfig
from credentials.application.observability import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from credentials.application.services import APIKeyService
from credentials.dependencies.encryption import get_encryption_engine
from credentials.infrastructure.api_key_repository import APIKeyRecordRepository
from credentials.ports.repositories import IAPIKeyRecordRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import APIKeySettings, get_api_key_settings
from shared_kernel.encryption import EncryptionEngine


def get_api_key_service_probe() -> APIKeyServiceProbe:
    """Get APIKeyServiceProbe instance.

    Returns:
        DefaultAPIKeyServiceProbe instance for observability
    """
    return DefaultAPIKeyServiceProbe()


def get_api_key_service_config(
    settings: Annotated[APIKeySettings, Depends(get_api_key_settings)],
) -> APIKeyServiceConfig:
    """Build the service's business-rule configuration from settings."""
    return APIKeyServiceConfig(
        min_key_name_length=settings.min_key_name_length,
        max_key_name_length=settings.max_key_name_length,
        max_keys_per_platform=settings.max_keys_per_platform,
        default_expiration_days=settings.default_expiration_days,
        allow_multiple_active_keys=settings.allow_multiple_active_keys,
    )


def get_api_key_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> IAPIKeyRecordRepository:
    """Get APIKeyRecordRepository instance.

    Args:
        session: Async database session

    Returns:
        APIKeyRecordRepository bound to the request's session
    """
    return APIKeyRecordRepository(session=session)


def get_api_key_service(
    api_key_repo: Annotated[IAPIKeyRecordRepository, Depends(get_api_key_repository)],
    engine: Annotated[EncryptionEngine, Depends(get_encryption_engine)],
    config: Annotated[APIKeyServiceConfig, Depends(get_api_key_service_config)],
    probe: Annotated[APIKeyServiceProbe, Depends(get_api_key_service_probe)],
) -> APIKeyService:
    """Get APIKeyService instance.

    Args:
        api_key_repo: API key record repository
        engine: Process-wide encryption engine
        config: Business-rule configuration
        probe: API key service probe for observability

    Returns:
        APIKeyService instance
    """
    return APIKeyService(
        api_key_repository=api_key_repo,
        encryption_engine=engine,
        config=config,
        probe=probe,
    )
