"""
Tests for Structured Logging.

Requires Python 3.11+.
"""

import json
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from obsidian_dev_helper.utils import logger as logger_module
from obsidian_dev_helper.utils.config import LoggingSettings, Settings
from obsidian_dev_helper.utils.logger import close_log_file, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo configure_logging so other tests log with structlog defaults."""
    yield
    close_log_file()
    structlog.reset_defaults()


def file_settings(log_path: Path, **overrides) -> Settings:
    return Settings().model_copy(
        update={
            "logging": LoggingSettings(format="json", file_path=log_path),
            **overrides,
        }
    )


class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_app_context_uses_given_settings(self, tmp_path: Path):
        """Test log entries carry the app name and version passed in, not the environment's."""
        log_path = tmp_path / "dev.log"
        configure_logging(file_settings(log_path, app_name="custom-app", app_version="9.9.9"))

        get_logger("test").info("plugin_installed", plugin_id="sample-plugin")
        close_log_file()

        record = json.loads(log_path.read_text().splitlines()[-1])
        assert record["event"] == "plugin_installed"
        assert record["plugin_id"] == "sample-plugin"
        assert record["app"] == "custom-app"
        assert record["version"] == "9.9.9"

    def test_log_file_is_closed(self, tmp_path: Path):
        """Test the log file handle is released by close_log_file."""
        configure_logging(file_settings(tmp_path / "dev.log"))
        handle = logger_module._log_file
        assert handle is not None and not handle.closed

        close_log_file()

        assert handle.closed
        assert logger_module._log_file is None

    def test_reconfiguring_closes_previous_file(self, tmp_path: Path):
        """Test switching log files does not leak the first handle."""
        configure_logging(file_settings(tmp_path / "first.log"))
        first = logger_module._log_file

        configure_logging(file_settings(tmp_path / "second.log"))

        assert first is not None and first.closed
        assert logger_module._log_file is not None
        assert logger_module._log_file.name.endswith("second.log")
