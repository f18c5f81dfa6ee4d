"""
Obsidian Dev Helper Debouncer.

Debounces rapid file system events.
Requires Python 3.11+.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from obsidian_dev_helper.utils.logger import LoggerMixin

ChangeCallback = Callable[[list[tuple[Path, str]]], Any]


@dataclass
class PendingChange:
    """A pending file change waiting to be processed."""

    path: Path
    change_type: str  # created, modified, moved
    timestamp: float


class Debouncer(LoggerMixin):
    """
    Debounces rapid file changes.

    Accumulates changes and triggers the callback once the delay has
    passed with no new changes. Bundlers rewrite their output several
    times per build, and this collapses those writes into one install.
    """

    def __init__(
        self,
        delay_seconds: float = 1.0,
        callback: ChangeCallback | None = None,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            delay_seconds: Quiet period before processing
            callback: Function to call with accumulated changes
        """
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")

        self._delay = delay_seconds
        self._callback = callback
        self._pending: dict[Path, PendingChange] = {}
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def delay_seconds(self) -> float:
        return self._delay

    def set_callback(self, callback: ChangeCallback) -> None:
        """Set or update the callback function."""
        self._callback = callback

    def debounce(self, path: Path, change_type: str) -> None:
        """
        Add a file change to the pending queue.

        Any pending timer is cancelled and the callback is rescheduled
        for delay_seconds from now.

        Args:
            path: Path to the changed file
            change_type: Type of change (created, modified, moved)
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

            self._pending[path] = PendingChange(
                path=path,
                change_type=change_type,
                timestamp=time.time(),
            )

            self._timer = threading.Timer(self._delay, self._process_pending)
            self._timer.daemon = True
            self._timer.start()

    def _take_pending(self) -> list[tuple[Path, str]]:
        # Caller holds the lock
        changes = [
            (change.path, change.change_type)
            for change in self._pending.values()
        ]
        self._pending.clear()
        return changes

    def _process_pending(self) -> None:
        """Process all pending changes."""
        with self._lock:
            # A newer debounce() replaced this timer after it had already fired
            if threading.current_thread() is not self._timer:
                return
            self._timer = None
            if not self._pending:
                return
            changes = self._take_pending()

        self.log.debug("processing_debounced_changes", count=len(changes))
        self._run_callback(changes)

    def _run_callback(self, changes: list[tuple[Path, str]]) -> None:
        if self._callback is None:
            return
        try:
            self._callback(changes)
        except Exception as e:
            self.log.error("debounce_callback_failed", error=str(e))

    def flush(self) -> list[tuple[Path, str]]:
        """
        Immediately process all pending changes.

        Returns:
            List of (path, change_type) tuples that were pending
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            changes = self._take_pending()

        if changes:
            self._run_callback(changes)
        return changes

    def clear(self) -> None:
        """Clear all pending changes without processing."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()

    @property
    def pending_count(self) -> int:
        """Get number of pending changes."""
        return len(self._pending)

    @property
    def pending_paths(self) -> list[Path]:
        """Get list of paths with pending changes."""
        return list(self._pending.keys())
