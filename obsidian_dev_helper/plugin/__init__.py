"""
Obsidian Dev Helper Plugin Package.

Plugin manifest parsing and build artifact locations.
Requires Python 3.11+.
"""

from obsidian_dev_helper.plugin.models import (
    MANIFEST_NAME,
    SCRIPT_NAME,
    STYLE_NAME,
    PluginArtifacts,
    PluginManifest,
    load_manifest,
)

__all__ = [
    "MANIFEST_NAME",
    "SCRIPT_NAME",
    "STYLE_NAME",
    "PluginArtifacts",
    "PluginManifest",
    "load_manifest",
]
