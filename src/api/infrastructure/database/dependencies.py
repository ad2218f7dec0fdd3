"""Database dependency injection for FastAPI.

Provides the async session factory with proper transaction management and
connection pooling.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_write_engine: AsyncEngine | None = None

# Module-level sessionmaker instance (created with the engine)
_write_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_write_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine
    """
    global _write_engine, _write_sessionmaker
    if _write_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _write_engine is None:
                settings = get_database_settings()
                _write_engine = create_write_engine(settings)
                _probe.engine_created(
                    "write", settings.connection_string, settings.pool_max_connections
                )
                # Create sessionmaker once with the engine
                _write_sessionmaker = async_sessionmaker(
                    _write_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
    return _write_engine


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for API key persistence (FastAPI dependency).

    The session is configured to NOT auto-commit. Repositories commit or
    roll back each unit of work themselves.

    Usage:
        @router.post("/api-keys")
        async def add_key(
            session: AsyncSession = Depends(get_write_session)
        ):
            session.add(record)
            await session.commit()

    Yields:
        AsyncSession for database operations
    """
    # Ensure engine and sessionmaker are initialized
    get_write_engine()
    assert _write_sessionmaker is not None

    async with _write_sessionmaker() as session:
        yield session


async def close_database_connections() -> None:
    """Close the database engine connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _write_engine, _write_sessionmaker

    if _write_engine is not None:
        await _write_engine.dispose()
        _probe.pool_closed()
        _write_engine = None
        _write_sessionmaker = None


async def verify_database_connection() -> None:
    """Run a trivial query on the engine.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
    """
    engine = get_write_engine()
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        raise DatabaseConnectionError(f"Database is unreachable: {e}") from e
