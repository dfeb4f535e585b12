"""Shared fixtures for integration tests.

Each test gets its own in-memory SQLite database. API clients are built from
a fresh app whose ``get_db`` dependency is overridden to use that database
and whose settings carry the test API key.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from loguru import logger
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from product_api.api.main import create_app
from product_api.core.config import Settings, get_settings
from product_api.core.context import RequestContext
from product_api.core.logging import _state
from product_api.infrastructure.database.base import Base
from product_api.infrastructure.database.dependencies import get_db
from product_api.infrastructure.database.seed import seed_products
from product_api.infrastructure.database.session import _db_manager, close_database

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Clear RequestContext before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None]:
    """Keep app creation from adding stdout sinks during tests."""
    logger.remove()
    _state.configured = True
    yield
    logger.remove()


@pytest.fixture(autouse=True)
async def clean_database_connections() -> AsyncGenerator[None]:
    """Dispose the process-wide engine after each test."""
    yield
    if _db_manager._engine is not None:
        await close_database()
    else:
        _db_manager.reset()


@pytest.fixture
def test_settings(api_key: str) -> Settings:
    """Settings for API tests, with the test API key configured."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        api_key=SecretStr(api_key),
        seed_on_startup=False,
    )


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with the schema created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session bound to the test database."""
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_session(db_session: AsyncSession) -> AsyncSession:
    """Session whose database holds the five fixture products."""
    await seed_products(db_session)
    await db_session.commit()
    return db_session


async def _client_for(
    session: AsyncSession, settings: Settings
) -> AsyncGenerator[AsyncClient]:
    test_app = create_app(settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_settings] = lambda: settings

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    test_app.dependency_overrides.clear()


@pytest.fixture
async def client_with_db(
    db_session: AsyncSession, test_settings: Settings
) -> AsyncGenerator[AsyncClient]:
    """API client over an empty database."""
    async for ac in _client_for(db_session, test_settings):
        yield ac


@pytest.fixture
async def seeded_client(
    seeded_session: AsyncSession, test_settings: Settings
) -> AsyncGenerator[AsyncClient]:
    """API client over a database holding the fixture products."""
    async for ac in _client_for(seeded_session, test_settings):
        yield ac


@pytest.fixture
def auth_headers(api_key: str) -> dict[str, str]:
    """Headers carrying a valid API key."""
    return {"api-key": api_key}
