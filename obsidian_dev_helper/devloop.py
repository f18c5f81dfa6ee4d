"""
Obsidian Dev Helper Dev Loop.

Ties the build process, artifact watcher and installer together and
owns their lifecycle.
Requires Python 3.11+.
"""

import asyncio
import signal
from pathlib import Path

from obsidian_dev_helper.builder.build_process import BuildProcess
from obsidian_dev_helper.exceptions import DevHelperError
from obsidian_dev_helper.installer.helper_plugin import install_helper
from obsidian_dev_helper.installer.plugin_installer import PluginInstaller
from obsidian_dev_helper.installer.vault import Vault
from obsidian_dev_helper.plugin.models import PluginArtifacts
from obsidian_dev_helper.reloader.url_opener import PluginReloader, UrlOpener
from obsidian_dev_helper.utils.config import Settings
from obsidian_dev_helper.utils.console import TaggedOutput
from obsidian_dev_helper.utils.logger import LoggerMixin
from obsidian_dev_helper.watcher.file_watcher import FileWatcher

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class DevLoop(LoggerMixin):
    """
    Builds, installs and reloads a plugin until stopped.

    The loop ends when the build command exits on its own or when a
    stop is requested (SIGINT, SIGTERM or request_stop()).
    """

    def __init__(
        self,
        settings: Settings,
        output: TaggedOutput | None = None,
        opener: UrlOpener | None = None,
    ) -> None:
        if settings.vault.path is None:
            raise ValueError("settings.vault.path is required")

        self._settings = settings
        self._output = output or TaggedOutput()
        self._vault = Vault(settings.vault.path)
        self._artifacts = PluginArtifacts.from_build_directory(
            settings.build.directory,
            settings.build.manifest_file,
        )
        self._installer = PluginInstaller(
            vault=self._vault,
            artifacts=self._artifacts,
            reloader=PluginReloader(
                enabled=settings.reload.enabled,
                opener=opener,
                scheme=settings.reload.scheme,
                action=settings.reload.action,
            ),
            output=self._output,
        )
        self._watcher = FileWatcher(
            paths=self._artifacts.paths,
            on_change=self._on_artifacts_changed,
            debounce_delay_seconds=settings.build.delay_seconds,
            use_polling=settings.watcher.use_polling,
        )
        self._build = BuildProcess(
            command=settings.build.command,
            output=self._output,
        )
        self._stop_event: asyncio.Event | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def vault(self) -> Vault:
        return self._vault

    @property
    def artifacts(self) -> PluginArtifacts:
        return self._artifacts

    @property
    def installer(self) -> PluginInstaller:
        return self._installer

    @property
    def watcher(self) -> FileWatcher:
        return self._watcher

    @property
    def build(self) -> BuildProcess:
        return self._build

    def _on_artifacts_changed(self, changes: list[tuple[Path, str]]) -> None:
        """Debounced callback; runs on the debouncer's timer thread."""
        self.log.debug("artifacts_changed", paths=[str(p) for p, _ in changes])
        try:
            self._installer.install()
        except DevHelperError as e:
            self.log.error("install_failed", error=str(e))
            self._output.error(str(e))

    def request_stop(self) -> None:
        """Ask a running loop to shut down. Safe to call from any thread."""
        if self._loop is None or self._stop_event is None:
            return
        self._loop.call_soon_threadsafe(self._stop_event.set)

    def _install_signal_handlers(self) -> list[signal.Signals]:
        assert self._loop is not None and self._stop_event is not None
        installed = []
        for sig in STOP_SIGNALS:
            try:
                self._loop.add_signal_handler(sig, self._stop_event.set)
            except (NotImplementedError, RuntimeError, ValueError):
                # Not supported on this platform or outside the main thread
                continue
            installed.append(sig)
        return installed

    def _remove_signal_handlers(self, installed: list[signal.Signals]) -> None:
        assert self._loop is not None
        for sig in installed:
            self._loop.remove_signal_handler(sig)

    async def run(self) -> int:
        """
        Run until the build exits or a stop is requested.

        Returns:
            The build command's exit code, or 0 if stopped on request

        Raises:
            VaultNotFoundError: If the vault is invalid
        """
        self._vault.validate()
        install_helper(self._vault, self._output)

        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        installed = self._install_signal_handlers()

        try:
            self._watcher.start()
            await self._build.start()

            build_task = asyncio.create_task(self._build.wait())
            stop_task = asyncio.create_task(self._stop_event.wait())
            done, _ = await asyncio.wait(
                {build_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )

            if build_task in done:
                returncode = build_task.result()
                stop_task.cancel()
                self.log.info("build_exited", returncode=returncode)
                if returncode != 0:
                    self._output.error(f"build command exited with status {returncode}")
                return returncode

            build_task.cancel()
            self.log.info("stop_requested")
            return 0
        finally:
            await self._shutdown()
            self._remove_signal_handlers(installed)

    async def _shutdown(self) -> None:
        self._watcher.stop()
        await self._build.stop(timeout=self._settings.watcher.stop_timeout_seconds)
