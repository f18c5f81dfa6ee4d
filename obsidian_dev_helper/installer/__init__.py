"""
Obsidian Dev Helper Installer Package.

Vault access, plugin installation and the reload helper plugin.
Requires Python 3.11+.
"""

from obsidian_dev_helper.installer.helper_plugin import HELPER_PLUGIN_ID, install_helper
from obsidian_dev_helper.installer.plugin_installer import InstallResult, PluginInstaller
from obsidian_dev_helper.installer.vault import Vault

__all__ = ["HELPER_PLUGIN_ID", "install_helper", "InstallResult", "PluginInstaller", "Vault"]
