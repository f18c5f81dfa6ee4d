"""
Obsidian Dev Helper Utilities Package.

Common utilities shared across all modules.
Requires Python 3.11+.
"""

from obsidian_dev_helper.utils.config import Settings, get_settings
from obsidian_dev_helper.utils.console import TaggedOutput
from obsidian_dev_helper.utils.logger import configure_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "TaggedOutput",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
]
