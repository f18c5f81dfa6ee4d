"""
Obsidian Dev Helper.

Developer-loop automation for Obsidian plugins: build in watch mode,
install into a vault on every change, and reload.
Requires Python 3.11+.
"""

__version__ = "0.1.0"
