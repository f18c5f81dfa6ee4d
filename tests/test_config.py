"""
Tests for Configuration and Console Output.

Requires Python 3.11+.
"""

import io
from pathlib import Path

import pytest
from pydantic import ValidationError

from obsidian_dev_helper.utils.config import BuildSettings, LoggingSettings, Settings, get_settings
from obsidian_dev_helper.utils.console import TaggedOutput


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        """Test defaults match the documented CLI defaults."""
        settings = Settings()

        assert settings.vault.path is None
        assert settings.build.command == "npm run dev"
        assert settings.build.delay_seconds == 1.0
        assert settings.build.directory == Path(".")
        assert settings.reload.enabled is True
        assert settings.watcher.use_polling is False
        assert settings.logging.format == "console"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        """Test nested settings read their own prefixes."""
        monkeypatch.setenv("DEVHELPER_VAULT_PATH", "/tmp/vault")
        monkeypatch.setenv("DEVHELPER_BUILD_COMMAND", "yarn dev")
        monkeypatch.setenv("DEVHELPER_BUILD_DELAY_SECONDS", "2.5")
        monkeypatch.setenv("DEVHELPER_RELOAD_ENABLED", "false")

        settings = Settings()

        assert settings.vault.path == Path("/tmp/vault")
        assert settings.build.command == "yarn dev"
        assert settings.build.delay_seconds == 2.5
        assert settings.reload.enabled is False

    def test_manifest_defaults_to_build_directory(self):
        """Test the manifest path follows the build directory."""
        build = BuildSettings(directory=Path("dist"))
        assert build.resolved_manifest_file == Path("dist/manifest.json")

        build = BuildSettings(directory=Path("dist"), manifest_file=Path("manifest.json"))
        assert build.resolved_manifest_file == Path("manifest.json")

    def test_delay_must_be_positive(self):
        """Test a zero debounce delay is rejected."""
        with pytest.raises(ValidationError):
            BuildSettings(delay_seconds=0)

    def test_log_level_validation(self):
        """Test log levels are normalized and checked."""
        assert LoggingSettings(level="debug").level == "DEBUG"

        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")

        with pytest.raises(ValidationError):
            LoggingSettings(format="xml")

    def test_get_settings_is_cached(self):
        """Test get_settings returns a singleton."""
        assert get_settings() is get_settings()


class TestTaggedOutput:
    """Test cases for TaggedOutput."""

    def test_plain_tags(self):
        """Test uncolored output uses bracketed tags."""
        stream = io.StringIO()
        output = TaggedOutput(stream=stream, color=False)

        output.build("compiling")
        output.install("Installing x v1")
        output.error("boom")

        assert stream.getvalue().splitlines() == [
            "[build] compiling",
            "[instl] Installing x v1",
            "error: boom",
        ]

    def test_colored_tags(self):
        """Test colored output uses the tag colors."""
        stream = io.StringIO()
        output = TaggedOutput(stream=stream, color=True)

        output.build("compiling")
        output.install("done")

        lines = stream.getvalue().splitlines()
        assert lines[0] == "\x1b[44;37m build \x1b[0m compiling"
        assert lines[1] == "\x1b[45;37m instl \x1b[0m done"

    def test_color_autodetect(self, monkeypatch: pytest.MonkeyPatch):
        """Test non-TTY streams and NO_COLOR disable color."""
        assert TaggedOutput(stream=io.StringIO()).color is False

        class FakeTTY(io.StringIO):
            def isatty(self) -> bool:
                return True

        assert TaggedOutput(stream=FakeTTY()).color is True

        monkeypatch.setenv("NO_COLOR", "1")
        assert TaggedOutput(stream=FakeTTY()).color is False
