"""
Obsidian Dev Helper Exceptions.

Requires Python 3.11+.
"""


class DevHelperError(Exception):
    """Base class for errors reported to the user."""


class ManifestError(DevHelperError):
    """The plugin manifest is missing or invalid."""


class InstallError(DevHelperError):
    """A build artifact could not be installed into the vault."""


class VaultNotFoundError(DevHelperError):
    """The target directory is not an Obsidian vault."""


class WatcherError(DevHelperError):
    """The build output directories could not be watched."""
