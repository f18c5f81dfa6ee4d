"""
Obsidian Dev Helper Reloader.

Asks a running Obsidian to reload a plugin by opening a protocol URL
that the reload helper plugin handles.
Requires Python 3.11+.
"""

import shutil
import subprocess
import sys
from urllib.parse import quote, urlencode

from obsidian_dev_helper.utils.logger import LoggerMixin


def build_reload_url(
    plugin_id: str,
    scheme: str = "obsidian",
    action: str = "devtool-reload",
) -> str:
    """
    Build the URL that triggers a plugin reload.

    Example:
        obsidian://devtool-reload?plugin=my-plugin
    """
    query = urlencode({"plugin": plugin_id}, quote_via=quote)
    return f"{scheme}://{action}?{query}"


def default_open_commands(platform: str | None = None) -> list[list[str]]:
    """The "open URL" commands to try for a platform, in order."""
    platform = platform or sys.platform
    if platform == "win32":
        return [["cmd", "/c", "start", ""]]
    if platform == "darwin":
        return [["open"]]
    return [["xdg-open"], ["open"]]


class UrlOpener(LoggerMixin):
    """
    Opens URLs with the operating system's handler.

    Each candidate command is tried in turn until one succeeds. Output is
    discarded, and failures are logged rather than raised.
    """

    def __init__(
        self,
        commands: list[list[str]] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._commands = commands if commands is not None else default_open_commands()
        self._timeout = timeout

    @property
    def commands(self) -> list[list[str]]:
        return [list(c) for c in self._commands]

    def open(self, url: str) -> bool:
        """
        Open a URL.

        Returns:
            True if one of the commands exited successfully
        """
        for command in self._commands:
            executable = shutil.which(command[0])
            if executable is None:
                self.log.debug("open_command_not_found", command=command[0])
                continue

            try:
                result = subprocess.run(
                    [executable, *command[1:], url],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    timeout=self._timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                self.log.warning("open_command_failed", command=command[0], error=str(e))
                continue

            if result.returncode == 0:
                self.log.debug("url_opened", url=url, command=command[0])
                return True

            self.log.debug(
                "open_command_failed",
                command=command[0],
                returncode=result.returncode,
            )

        self.log.warning("url_open_failed", url=url)
        return False


class PluginReloader(LoggerMixin):
    """Reloads plugins through the reload helper's protocol handler."""

    def __init__(
        self,
        enabled: bool = True,
        opener: UrlOpener | None = None,
        scheme: str = "obsidian",
        action: str = "devtool-reload",
    ) -> None:
        self._enabled = enabled
        self._opener = opener or UrlOpener()
        self._scheme = scheme
        self._action = action

    @property
    def enabled(self) -> bool:
        return self._enabled

    def reload(self, plugin_id: str) -> bool:
        """
        Request a reload of the given plugin.

        Returns:
            True if the reload URL was handed to the OS
        """
        if not self._enabled:
            return False

        url = build_reload_url(plugin_id, scheme=self._scheme, action=self._action)
        self.log.info("reloading_plugin", plugin_id=plugin_id, url=url)
        return self._opener.open(url)
