"""
Obsidian Dev Helper Reload Helper Plugin.

A tiny Obsidian plugin that registers the ``devtool-reload`` protocol
handler. Opening ``obsidian://devtool-reload?plugin=<id>`` disables and
re-enables the plugin with that id. It also adds a "Reload Plugin"
command per installed plugin so reloads can be bound to hotkeys.
Requires Python 3.11+.
"""

import json
from pathlib import Path

from obsidian_dev_helper.installer.vault import Vault
from obsidian_dev_helper.plugin.models import MANIFEST_NAME, SCRIPT_NAME, STYLE_NAME
from obsidian_dev_helper.utils.console import TaggedOutput
from obsidian_dev_helper.utils.logger import get_logger

logger = get_logger(__name__)

HELPER_PLUGIN_ID = "obsidian-dev-helper"
RELOAD_ACTION = "devtool-reload"

HELPER_MANIFEST = {
    "id": HELPER_PLUGIN_ID,
    "name": "Reload Helper (Developer Tool)",
    "version": "0.0.0",
    "minAppVersion": "1.0.0",
    "description": "Registers a helper URL to reload a plugin.",
    "author": "obsidian-dev-helper",
    "isDesktopOnly": True,
}

HELPER_SCRIPT = """\
const obsidian = require("obsidian");

module.exports = {
	__esModule: true,
	default: class extends obsidian.Plugin {
		async doReloadPlugin(id) {
			await this.app.plugins.disablePlugin(id);
			await this.app.plugins.enablePlugin(id);
		}

		onload() {
			this.registerObsidianProtocolHandler("%(action)s", (args) => {
				if ("plugin" in args) {
					console.log("Requested to reload plugin:", args.plugin);
					this.doReloadPlugin(args.plugin);
				}
			});

			for (const plugin of Object.values(this.app.plugins.manifests)) {
				this.addCommand({
					id: `reload-plugin-${plugin.id}`,
					name: `Reload Plugin: ${plugin.name}`,
					callback: () => this.doReloadPlugin(plugin.id),
				});
			}
		}
	}
};
"""


def install_helper(vault: Vault, output: TaggedOutput | None = None) -> Path:
    """
    Install (or overwrite) the reload helper plugin in a vault.

    Args:
        vault: Target vault
        output: Where to report progress

    Returns:
        The helper's install directory
    """
    output = output or TaggedOutput()
    install_dir = vault.plugin_dir(HELPER_PLUGIN_ID)

    output.install("Installing helper plugin.")
    (install_dir / MANIFEST_NAME).write_text(
        json.dumps(HELPER_MANIFEST, indent="\t") + "\n", encoding="utf-8"
    )
    (install_dir / SCRIPT_NAME).write_text(
        HELPER_SCRIPT % {"action": RELOAD_ACTION}, encoding="utf-8"
    )
    (install_dir / STYLE_NAME).touch()

    logger.info("helper_plugin_installed", path=str(install_dir))
    return install_dir
