"""Unit tests for the uvicorn entry point."""

import types

import pytest
from pytest_mock import MockerFixture

from product_api.core.config import Settings


@pytest.fixture
def entrypoint(mocker: MockerFixture, mock_settings: Settings) -> types.ModuleType:
    """The root main module with settings and logging patched."""
    import main

    mocker.patch.object(main, "get_settings", return_value=mock_settings)
    mocker.patch.object(main, "setup_logging")
    mocker.patch.object(main, "logger")
    return main


@pytest.mark.unit
class TestMain:
    """Test server startup arguments."""

    def test_debug_runs_with_reload(
        self,
        mocker: MockerFixture,
        entrypoint: types.ModuleType,
        mock_settings: Settings,
    ) -> None:
        run = mocker.patch("main.uvicorn.run")
        mock_settings.debug = True

        entrypoint.main()

        args, kwargs = run.call_args
        assert args[0] == "product_api.api.main:app"
        assert kwargs["reload"] is True
        assert kwargs["port"] == mock_settings.api_port

    def test_port_env_overrides_setting(
        self,
        mocker: MockerFixture,
        entrypoint: types.ModuleType,
        mock_settings: Settings,
        isolated_env: pytest.MonkeyPatch,
    ) -> None:
        run = mocker.patch("main.uvicorn.run")
        isolated_env.setenv("PORT", "8080")
        mock_settings.debug = False

        entrypoint.main()

        args, kwargs = run.call_args
        assert args[0] is entrypoint.app
        assert kwargs["port"] == 8080
        assert kwargs["reload"] is False
