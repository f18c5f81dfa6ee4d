"""
Obsidian Dev Helper Reloader Package.

URL-based plugin reload signalling.
Requires Python 3.11+.
"""

from obsidian_dev_helper.reloader.url_opener import (
    PluginReloader,
    UrlOpener,
    build_reload_url,
    default_open_commands,
)

__all__ = ["PluginReloader", "UrlOpener", "build_reload_url", "default_open_commands"]
