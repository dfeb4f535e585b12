"""Async database engine and session lifecycle management.

Core functionality:
- **Connection pooling**: Configurable pool with overflow and recycling
- **Session factory**: Async session creation with commit/rollback handling
- **Health checks**: Connectivity validation for startup and ``/health``
- **Schema bootstrap**: Creating missing tables at startup

A single engine is kept per process by ``_DatabaseManager`` so that all
requests share one connection pool.
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from product_api.core.config import get_settings
from product_api.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    POOL_RECYCLE_SECONDS,
)
from product_api.infrastructure.database.models import Product


def _engine_options(database_url: str) -> dict[str, Any]:
    """Driver-specific engine keyword arguments.

    Args:
        database_url: The URL the engine will connect to.

    Returns:
        dict[str, Any]: Keyword arguments for ``create_async_engine``.
    """
    db_config = get_settings().database_config

    if database_url.startswith("sqlite+aiosqlite://"):
        # One shared connection so an in-memory database survives across sessions
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

    return {
        "pool_size": db_config.pool_size,
        "max_overflow": db_config.max_overflow,
        "pool_timeout": db_config.pool_timeout,
        "pool_pre_ping": db_config.pool_pre_ping,
        "pool_recycle": POOL_RECYCLE_SECONDS,
        "connect_args": {"command_timeout": COMMAND_TIMEOUT_SECONDS},
    }


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    db_config = get_settings().database_config
    url = database_url or db_config.database_url

    engine = create_async_engine(url, echo=db_config.echo, **_engine_options(url))

    logger.info(
        "Created database engine - driver: {}, pool_size: {}",
        engine.url.drivername,
        db_config.pool_size,
    )

    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        self.get_engine(),
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose the engine and forget the session factory."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        """Reset the manager state. Used primarily for testing."""
        self._engine = None
        self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Open a session that commits on success and rolls back on error.

    Yields:
        AsyncSession: Database session for performing operations.

    Raises:
        Exception: Any exception raised inside the block, after rollback.

    Example:
        async with get_async_session() as session:
            await ProductRepository(session).count()
    """
    async_session_factory = get_session_factory()
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


async def close_database() -> None:
    """Dispose the engine at application shutdown."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if the database answers a trivial query.

    Returns:
        tuple[bool, str | None]: Success flag and the error message on failure.
    """
    try:
        async with get_engine().connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            _ = result.scalar()
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    else:
        return True, None


async def create_tables() -> None:
    """Create any missing tables for the registered models."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Product.metadata.create_all)
    logger.info("Database tables ensured")
