"""
Obsidian Dev Helper Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import io
import json
from collections.abc import Generator
from pathlib import Path

import pytest

from obsidian_dev_helper.reloader.url_opener import UrlOpener
from obsidian_dev_helper.utils.config import Settings, get_settings
from obsidian_dev_helper.utils.console import TaggedOutput


class RecordingOpener(UrlOpener):
    """UrlOpener that records URLs instead of launching anything."""

    def __init__(self, result: bool = True) -> None:
        super().__init__(commands=[])
        self.result = result
        self.opened: list[str] = []

    def open(self, url: str) -> bool:
        self.opened.append(url)
        return self.result


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep DEVHELPER_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("DEVHELPER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_manifest() -> dict:
    """A typical plugin manifest."""
    return {
        "id": "sample-plugin",
        "name": "Sample Plugin",
        "version": "1.2.3",
        "minAppVersion": "0.15.0",
        "description": "A plugin used in tests.",
        "author": "Tester",
        "isDesktopOnly": False,
        "fundingUrl": "https://example.com/fund",
    }


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """An empty Obsidian vault."""
    path = tmp_path / "vault"
    (path / ".obsidian").mkdir(parents=True)
    return path


@pytest.fixture
def build_dir(tmp_path: Path, sample_manifest: dict) -> Path:
    """A plugin build output directory with all three artifacts."""
    path = tmp_path / "plugin"
    path.mkdir()
    (path / "manifest.json").write_text(json.dumps(sample_manifest))
    (path / "main.js").write_text("module.exports = {};\n")
    (path / "styles.css").write_text(".sample { color: red; }\n")
    return path


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def output(stream: io.StringIO) -> TaggedOutput:
    """Uncolored tagged output captured in memory."""
    return TaggedOutput(stream=stream, color=False)


@pytest.fixture
def opener() -> RecordingOpener:
    return RecordingOpener()


@pytest.fixture
def settings(vault_path: Path, build_dir: Path) -> Settings:
    """Settings pointing at the fixture vault and build directory."""
    base = Settings()
    return base.model_copy(
        update={
            "vault": base.vault.model_copy(update={"path": vault_path}),
            "build": base.build.model_copy(
                update={"directory": build_dir, "delay_seconds": 0.1}
            ),
            "watcher": base.watcher.model_copy(update={"stop_timeout_seconds": 2.0}),
        }
    )


@pytest.fixture
def failing_opener() -> RecordingOpener:
    """An opener whose URL launches always fail."""
    return RecordingOpener(result=False)
