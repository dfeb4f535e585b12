"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from product_api.core.config import (
    DatabaseConfig,
    LogConfig,
    ObservabilityConfig,
    Settings,
    get_settings,
)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default values when no environment is set."""

    def test_defaults(self, isolated_env: pytest.MonkeyPatch) -> None:
        _ = isolated_env
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.app_name == "Product API"
        assert settings.environment == "development"
        assert settings.api_port == 3000
        assert settings.api_key is None
        assert settings.api_key_header == "api-key"
        assert settings.seed_on_startup is True
        assert settings.log_config.log_formatter_type == "console"
        assert settings.database_config.database_url.startswith("postgresql+asyncpg://")

    def test_get_settings_is_cached(self, isolated_env: pytest.MonkeyPatch) -> None:
        _ = isolated_env
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestSettingsEnvironment:
    """Test environment variable overrides."""

    def test_api_key_is_secret(self, isolated_env: pytest.MonkeyPatch) -> None:
        isolated_env.setenv("API_KEY", "abc123")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.api_key is not None
        assert settings.api_key.get_secret_value() == "abc123"
        assert "abc123" not in repr(settings)

    def test_empty_api_key_means_unset(self, isolated_env: pytest.MonkeyPatch) -> None:
        isolated_env.setenv("API_KEY", "")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.api_key is None

    def test_nested_settings(self, isolated_env: pytest.MonkeyPatch) -> None:
        isolated_env.setenv("LOG_CONFIG__LOG_LEVEL", "DEBUG")
        isolated_env.setenv(
            "DATABASE_CONFIG__DATABASE_URL", "sqlite+aiosqlite:///./products.db"
        )
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.log_config.log_level == "DEBUG"
        assert settings.database_config.database_url == "sqlite+aiosqlite:///./products.db"

    def test_production_adjustments(self, isolated_env: pytest.MonkeyPatch) -> None:
        isolated_env.setenv("ENVIRONMENT", "production")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.is_production is True
        assert settings.log_config.log_formatter_type == "json"
        assert settings.observability_config.exporter_type == "otlp"
        assert settings.observability_config.trace_sample_rate == 0.1

    def test_empty_docs_url_disables_docs(
        self, isolated_env: pytest.MonkeyPatch
    ) -> None:
        isolated_env.setenv("DOCS_URL", "")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.docs_url is None


@pytest.mark.unit
class TestNestedConfigs:
    """Test validation of nested config models."""

    @pytest.mark.parametrize(
        "url",
        ["postgresql://u:p@localhost/db", "sqlite:///file.db", "mysql+aiomysql://x"],
    )
    def test_sync_database_urls_are_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="async support"):
            DatabaseConfig(database_url=url)

    def test_slow_threshold_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LogConfig(slow_request_threshold_ms=0)

    def test_sample_rate_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(trace_sample_rate=1.5)

    def test_api_key_header_is_sensitive_by_default(self) -> None:
        assert "api-key" in LogConfig().sensitive_fields
