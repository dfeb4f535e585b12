"""Unit tests for Loguru configuration and formatters."""

import json
import logging
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from loguru import logger
from pytest_mock import MockerFixture

from product_api.core.config import Settings
from product_api.core.logging import (
    InterceptHandler,
    _state,
    make_console_formatter,
    serialize_for_json,
    setup_logging,
)


def _record(**extra: Any) -> dict[str, Any]:  # noqa: ANN401
    return {
        "time": datetime(2024, 6, 14, 12, 0, tzinfo=UTC),
        "level": SimpleNamespace(name="INFO"),
        "message": "Request completed",
        "name": "product_api.api",
        "function": "dispatch",
        "line": 42,
        "extra": extra,
        "exception": None,
    }


@pytest.mark.unit
class TestJsonSerialization:
    """Test JSON log line rendering."""

    def test_includes_core_fields_and_extra(self) -> None:
        line = serialize_for_json(_record(correlation_id="abc", status_code=200))

        entry = json.loads(line)
        assert line.endswith("\n")
        assert entry["message"] == "Request completed"
        assert entry["level"] == "INFO"
        assert entry["correlation_id"] == "abc"
        assert entry["status_code"] == 200

    def test_private_extra_keys_are_skipped(self) -> None:
        entry = json.loads(serialize_for_json(_record(_internal=1, path="/x")))

        assert "_internal" not in entry
        assert entry["path"] == "/x"

    def test_non_serializable_values_fall_back_to_str(self) -> None:
        entry = json.loads(serialize_for_json(_record(when=datetime(2024, 1, 1))))

        assert entry["when"] == "2024-01-01 00:00:00"


@pytest.mark.unit
class TestConsoleFormatter:
    """Test console line rendering."""

    def test_priority_fields_come_first(self) -> None:
        formatter = make_console_formatter([])

        line = formatter(
            _record(user_agent="pytest", method="GET", correlation_id="1234567890ab")
        )

        assert line.index("12345678") < line.index("GET") < line.index("user_agent")
        assert "1234567890ab" not in line

    def test_sensitive_extra_is_redacted(self) -> None:
        formatter = make_console_formatter(["api-key"])

        line = formatter(_record(**{"api-key": "secret"}))

        assert "secret" not in line
        assert "[REDACTED]" in line

    def test_braces_are_escaped(self) -> None:
        formatter = make_console_formatter([])

        line = formatter(_record(query="{q}"))

        assert "{{q}}" in line


@pytest.mark.unit
class TestSetupLogging:
    """Test one-time sink configuration."""

    def test_runs_only_once(
        self, mocker: MockerFixture, mock_settings: Settings
    ) -> None:
        mocker.patch.object(_state, "configured", new=False)
        add = mocker.patch.object(logger, "add")
        mocker.patch.object(logger, "remove")
        mocker.patch("product_api.core.logging.logging.basicConfig")

        setup_logging(mock_settings)
        setup_logging(mock_settings)

        add.assert_called_once()
        assert _state.configured is True

    def test_json_formatter_uses_custom_sink(
        self, mocker: MockerFixture, mock_settings: Settings
    ) -> None:
        mocker.patch.object(_state, "configured", new=False)
        add = mocker.patch.object(logger, "add")
        mocker.patch.object(logger, "remove")
        mocker.patch("product_api.core.logging.logging.basicConfig")
        mock_settings.log_config.log_formatter_type = "json"

        setup_logging(mock_settings)

        sink = add.call_args[0][0]
        assert callable(sink)
        assert "format" not in add.call_args[1]


@pytest.mark.unit
class TestInterceptHandler:
    """Test forwarding of stdlib records to Loguru."""

    def test_forwards_message_and_level(self) -> None:
        messages: list[Any] = []
        sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
        try:
            std_logger = logging.getLogger("tests.intercept")
            std_logger.handlers = [InterceptHandler()]
            std_logger.propagate = False
            std_logger.setLevel(logging.DEBUG)

            std_logger.warning("from stdlib %s", "logging")
        finally:
            logger.remove(sink_id)

        assert len(messages) == 1
        assert messages[0].record["level"].name == "WARNING"
        assert messages[0].record["message"] == "from stdlib logging"
