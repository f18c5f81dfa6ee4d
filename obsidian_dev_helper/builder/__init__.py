"""
Obsidian Dev Helper Builder Package.

Background plugin build process.
Requires Python 3.11+.
"""

from obsidian_dev_helper.builder.build_process import BuildProcess

__all__ = ["BuildProcess"]
