"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator
from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType

from product_api.core.config import Settings, get_settings
from product_api.core.context import RequestContext
from product_api.core.error_context import _get_sensitive_fields

APP_ENV_PREFIXES = (
    "APP_",
    "API_",
    "ENVIRONMENT",
    "DEBUG",
    "SEED_ON_STARTUP",
    "LOG_CONFIG__",
    "OBSERVABILITY_CONFIG__",
    "DATABASE_CONFIG__",
)


@pytest.fixture(autouse=True)
def clean_caches() -> Generator[None]:
    """Clear cached settings and request context around each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove application environment variables so defaults apply.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    for key in list(os.environ):
        if key.startswith(APP_ENV_PREFIXES) or key == "PORT":
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def mock_settings(isolated_env: pytest.MonkeyPatch, api_key: str) -> Settings:
    """Real Settings object with test values.

    Returns:
        Settings: Development settings with the test API key configured.
    """
    isolated_env.setenv("APP_NAME", "TestApp")
    isolated_env.setenv("ENVIRONMENT", "development")
    isolated_env.setenv("API_KEY", api_key)
    isolated_env.setenv("DATABASE_CONFIG__DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def mock_request(mocker: MockerFixture) -> MockType:
    """Mock FastAPI request for exception handler tests."""
    request = mocker.Mock()
    request.method = "POST"
    request.url.path = "/api/products"
    request.url.query = ""
    request.headers = {"api-key": "super-secret", "user-agent": "pytest"}
    return cast("MockType", request)
