"""
Obsidian Dev Helper Plugin Installer.

Copies build artifacts into a vault and triggers a reload.
Requires Python 3.11+.
"""

import os
import shutil
import threading
from dataclasses import dataclass, field
from pathlib import Path

from obsidian_dev_helper.exceptions import InstallError
from obsidian_dev_helper.installer.vault import Vault
from obsidian_dev_helper.plugin.models import STYLE_NAME, PluginArtifacts, load_manifest
from obsidian_dev_helper.reloader.url_opener import PluginReloader
from obsidian_dev_helper.utils.console import TaggedOutput
from obsidian_dev_helper.utils.logger import LoggerMixin

# Files a plugin can be installed without
OPTIONAL_FILES = frozenset({STYLE_NAME})


@dataclass
class InstallResult:
    """Outcome of one plugin install."""

    plugin_id: str
    version: str
    install_dir: Path
    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    reloaded: bool = False


def copy_atomic(source: Path, destination: Path) -> None:
    """
    Copy a file so that readers of destination never see a partial write.

    The data is written to a temporary sibling and then renamed over
    the destination.
    """
    tmp = destination.with_name(f".{destination.name}.tmp")
    try:
        shutil.copyfile(source, tmp)
        os.replace(tmp, destination)
    finally:
        tmp.unlink(missing_ok=True)


class PluginInstaller(LoggerMixin):
    """
    Installs a plugin's build output into a vault.

    Installs run on the debouncer's timer thread, so they are
    serialized with a lock.
    """

    def __init__(
        self,
        vault: Vault,
        artifacts: PluginArtifacts,
        reloader: PluginReloader | None = None,
        output: TaggedOutput | None = None,
    ) -> None:
        self._vault = vault
        self._artifacts = artifacts
        self._reloader = reloader or PluginReloader(enabled=False)
        self._output = output or TaggedOutput()
        self._lock = threading.Lock()

    @property
    def artifacts(self) -> PluginArtifacts:
        return self._artifacts

    def install(self) -> InstallResult:
        """
        Copy the artifacts into the vault and reload the plugin.

        Returns:
            What was installed

        Raises:
            ManifestError: If the manifest cannot be read
            InstallError: If a required artifact is missing or cannot be copied
        """
        with self._lock:
            manifest = load_manifest(self._artifacts.manifest_file)
            self._output.install(f"Installing {manifest.id} v{manifest.version}")

            try:
                install_dir = self._vault.plugin_dir(manifest.id)
            except (ValueError, OSError) as e:
                raise InstallError(f"could not create plugin directory: {e}") from e

            result = InstallResult(
                plugin_id=manifest.id,
                version=manifest.version,
                install_dir=install_dir,
            )

            for source, target_name in self._artifacts.install_targets():
                if not source.is_file():
                    if target_name in OPTIONAL_FILES:
                        self.log.debug("optional_artifact_missing", path=str(source))
                        result.skipped.append(target_name)
                        continue
                    raise InstallError(f"build artifact not found: {source}")

                try:
                    copy_atomic(source, install_dir / target_name)
                except OSError as e:
                    raise InstallError(f"could not copy {source}: {e}") from e
                result.copied.append(target_name)

            self.log.info(
                "plugin_installed",
                plugin_id=manifest.id,
                version=manifest.version,
                path=str(install_dir),
                copied=result.copied,
            )

            result.reloaded = self._reloader.reload(manifest.id)
            return result
