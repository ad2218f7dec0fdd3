"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from credentials.dependencies.encryption import get_encryption_engine
from credentials.presentation import register_api_key_error_handler
from credentials.presentation import router as credentials_router
from infrastructure.database.dependencies import (
    close_database_connections,
    verify_database_connection,
)
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_admin_settings, get_settings
from infrastructure.version import __version__

_probe = DefaultStartupProbe()


@asynccontextmanager
async def postdeck_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Eager construction of the encryption engine and loading of the admin
      token, so a missing master key or token fails at startup rather than
      on the first request
    - Database engine disposal on shutdown (engines are created lazily)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    get_admin_settings()
    get_encryption_engine()
    _probe.encryption_engine_ready()
    _probe.application_started(app_name=settings.app_name, version=__version__)

    yield

    _probe.application_stopping()
    await close_database_connections()


app = FastAPI(
    title="Postdeck API",
    description="Encrypted storage and validation of social platform API keys",
    version=__version__,
    lifespan=postdeck_lifespan,
)

register_api_key_error_handler(app)

# Include Credentials bounded context routes
app.include_router(credentials_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    """Check database connection health."""
    try:
        await verify_database_connection()
    except DatabaseConnectionError as e:
        return {"status": "error", "connected": False, "error": str(e)}

    return {"status": "ok", "connected": True}
