"""Root conftest.py for the Product API test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os

import pytest

# The module-level app is built on import; point it at SQLite before that
os.environ.setdefault("DATABASE_CONFIG__DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture
def api_key() -> str:
    """The API key configured for tests that exercise protected routes."""
    return "test-api-key"
