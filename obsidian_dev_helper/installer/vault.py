"""
Obsidian Dev Helper Vault.

Requires Python 3.11+.
"""

from pathlib import Path

from obsidian_dev_helper.exceptions import VaultNotFoundError
from obsidian_dev_helper.utils.logger import LoggerMixin

CONFIG_DIR_NAME = ".obsidian"


class Vault(LoggerMixin):
    """An Obsidian vault on disk and its plugin directories."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def config_dir(self) -> Path:
        return self._path / CONFIG_DIR_NAME

    @property
    def plugins_dir(self) -> Path:
        return self.config_dir / "plugins"

    def validate(self) -> None:
        """
        Check that the path is an Obsidian vault.

        Raises:
            VaultNotFoundError: If the vault's .obsidian directory is missing
        """
        if not self.config_dir.is_dir():
            raise VaultNotFoundError(f"could not find Obsidian vault at {self._path}")

    def plugin_dir(self, plugin_id: str) -> Path:
        """
        Get the install directory for a plugin, creating it if needed.

        Args:
            plugin_id: The plugin's manifest id

        Returns:
            Path to .obsidian/plugins/<plugin_id>
        """
        if not plugin_id or "/" in plugin_id or "\\" in plugin_id or plugin_id in (".", ".."):
            raise ValueError(f"invalid plugin id: {plugin_id!r}")

        install_dir = self.plugins_dir / plugin_id
        if not install_dir.is_dir():
            install_dir.mkdir(parents=True, exist_ok=True)
            self.log.debug("plugin_directory_created", path=str(install_dir))
        return install_dir
