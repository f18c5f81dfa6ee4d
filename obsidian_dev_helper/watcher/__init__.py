"""
Obsidian Dev Helper File Watcher Package.

File system monitoring of plugin build output.
Requires Python 3.11+.
"""

from obsidian_dev_helper.watcher.debouncer import Debouncer
from obsidian_dev_helper.watcher.file_watcher import ArtifactEventHandler, FileWatcher

__all__ = ["ArtifactEventHandler", "Debouncer", "FileWatcher"]
