"""
Obsidian Dev Helper Console Output.

Tagged, colored progress lines for the user's terminal.
Requires Python 3.11+.
"""

import os
import sys
import threading
from typing import TextIO

BUILD_TAG = "build"
INSTALL_TAG = "instl"

_TAG_COLORS = {
    BUILD_TAG: "44;37",
    INSTALL_TAG: "45;37",
}
_ERROR_COLOR = "31"
_RESET = "\x1b[0m"


class TaggedOutput:
    """
    Writes lines prefixed with a short tag such as `` build `` or `` instl ``.

    Build output and install progress come from different threads, so
    every line is written and flushed under a lock.
    """

    def __init__(self, stream: TextIO | None = None, color: bool | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._color = _detect_color(self._stream) if color is None else color
        self._lock = threading.Lock()

    @property
    def color(self) -> bool:
        return self._color

    def tagged(self, tag: str, message: str) -> None:
        """Write one message line with its tag."""
        if self._color:
            code = _TAG_COLORS.get(tag, "7")
            prefix = f"\x1b[{code}m {tag} {_RESET} "
        else:
            prefix = f"[{tag}] "
        self._write(prefix + message)

    def build(self, line: str) -> None:
        self.tagged(BUILD_TAG, line)

    def install(self, message: str) -> None:
        self.tagged(INSTALL_TAG, message)

    def error(self, message: str) -> None:
        text = f"error: {message}"
        if self._color:
            text = f"\x1b[{_ERROR_COLOR}m{text}{_RESET}"
        self._write(text)

    def _write(self, line: str) -> None:
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()


def _detect_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
