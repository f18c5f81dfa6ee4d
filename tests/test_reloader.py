"""
Tests for the Reloader.

Requires Python 3.11+.
"""

import subprocess

import pytest

from obsidian_dev_helper.reloader import url_opener
from obsidian_dev_helper.reloader.url_opener import (
    PluginReloader,
    UrlOpener,
    build_reload_url,
    default_open_commands,
)


class TestBuildReloadUrl:
    """Test cases for build_reload_url."""

    def test_default_url(self):
        """Test the URL handled by the reload helper."""
        assert build_reload_url("sample-plugin") == "obsidian://devtool-reload?plugin=sample-plugin"

    def test_plugin_id_is_quoted(self):
        """Test ids with reserved characters are percent-encoded."""
        assert build_reload_url("my plugin&x") == "obsidian://devtool-reload?plugin=my%20plugin%26x"

    def test_custom_scheme_and_action(self):
        """Test scheme and action are configurable."""
        url = build_reload_url("p", scheme="obsidian-dev", action="reload")
        assert url == "obsidian-dev://reload?plugin=p"


class TestDefaultOpenCommands:
    """Test cases for default_open_commands."""

    def test_linux_tries_xdg_open_first(self):
        assert default_open_commands("linux") == [["xdg-open"], ["open"]]

    def test_macos(self):
        assert default_open_commands("darwin") == [["open"]]

    def test_windows(self):
        assert default_open_commands("win32") == [["cmd", "/c", "start", ""]]


class TestUrlOpener:
    """Test cases for UrlOpener."""

    @pytest.fixture
    def calls(self, monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
        """Record subprocess.run calls; only 'open' is on PATH and it succeeds."""
        recorded: list[list[str]] = []

        def fake_which(name: str) -> str | None:
            return f"/usr/bin/{name}" if name in ("open", "broken") else None

        def fake_run(args, **kwargs):
            recorded.append(list(args))
            assert kwargs["stdout"] is subprocess.DEVNULL
            assert kwargs["stderr"] is subprocess.DEVNULL
            returncode = 1 if args[0].endswith("broken") else 0
            return subprocess.CompletedProcess(args, returncode)

        monkeypatch.setattr(url_opener.shutil, "which", fake_which)
        monkeypatch.setattr(url_opener.subprocess, "run", fake_run)
        return recorded

    def test_skips_missing_commands(self, calls: list[list[str]]):
        """Test commands not on PATH are skipped."""
        opener = UrlOpener(commands=[["xdg-open"], ["open"]])

        assert opener.open("obsidian://x") is True
        assert calls == [["/usr/bin/open", "obsidian://x"]]

    def test_falls_back_after_failure(self, calls: list[list[str]]):
        """Test a failing command falls through to the next one."""
        opener = UrlOpener(commands=[["broken"], ["open"]])

        assert opener.open("obsidian://x") is True
        assert [c[0] for c in calls] == ["/usr/bin/broken", "/usr/bin/open"]

    def test_extra_arguments_precede_url(self, calls: list[list[str]]):
        """Test command arguments are kept in front of the URL."""
        opener = UrlOpener(commands=[["open", "-g"]])

        opener.open("obsidian://x")

        assert calls == [["/usr/bin/open", "-g", "obsidian://x"]]

    def test_returns_false_when_nothing_works(self, calls: list[list[str]]):
        """Test failure is reported, not raised."""
        opener = UrlOpener(commands=[["xdg-open"], ["broken"]])

        assert opener.open("obsidian://x") is False

    def test_os_error_is_not_raised(self, monkeypatch: pytest.MonkeyPatch):
        """Test a command that cannot be executed is treated as a failure."""
        monkeypatch.setattr(url_opener.shutil, "which", lambda name: "/usr/bin/open")

        def fake_run(args, **kwargs):
            raise PermissionError("not executable")

        monkeypatch.setattr(url_opener.subprocess, "run", fake_run)

        assert UrlOpener(commands=[["open"]]).open("obsidian://x") is False


class TestPluginReloader:
    """Test cases for PluginReloader."""

    def test_reload_opens_url(self, opener):
        """Test reload hands the helper URL to the opener."""
        reloader = PluginReloader(enabled=True, opener=opener)

        assert reloader.reload("sample-plugin") is True
        assert opener.opened == ["obsidian://devtool-reload?plugin=sample-plugin"]

    def test_disabled_reloader_does_nothing(self, opener):
        """Test a disabled reloader never opens URLs."""
        reloader = PluginReloader(enabled=False, opener=opener)

        assert reloader.reload("sample-plugin") is False
        assert opener.opened == []
