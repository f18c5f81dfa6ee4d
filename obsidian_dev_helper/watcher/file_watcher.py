"""
Obsidian Dev Helper File Watcher.

Cross-platform monitoring of plugin build artifacts using watchdog.
Requires Python 3.11+.
"""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

from obsidian_dev_helper.exceptions import WatcherError
from obsidian_dev_helper.utils.logger import LoggerMixin
from obsidian_dev_helper.watcher.debouncer import ChangeCallback, Debouncer


def _normalize(path: str | bytes | Path) -> Path:
    # Resolve only the directory; the file itself may not exist yet
    head, tail = os.path.split(os.path.abspath(os.fsdecode(path)))
    return Path(os.path.realpath(head)) / tail


class ArtifactEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Handles file system events for a fixed set of artifact files.

    Events for any other file in the watched directories are dropped.
    """

    def __init__(self, debouncer: Debouncer, paths: Iterable[Path]) -> None:
        """
        Initialize the file handler.

        Args:
            debouncer: Debouncer to accumulate changes
            paths: Absolute paths of the files to report
        """
        super().__init__()
        self._debouncer = debouncer
        self._paths = frozenset(_normalize(p) for p in paths)

    @property
    def paths(self) -> frozenset[Path]:
        return self._paths

    def _match(self, path: str | bytes) -> Path | None:
        normalized = _normalize(path)
        return normalized if normalized in self._paths else None

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return

        path = self._match(event.src_path)
        if path is None:
            return

        self.log.debug("artifact_created", path=str(path))
        self._debouncer.debounce(path, "created")

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return

        path = self._match(event.src_path)
        if path is None:
            return

        self.log.debug("artifact_modified", path=str(path))
        self._debouncer.debounce(path, "modified")

    def on_deleted(self, event: FileDeletedEvent | DirDeletedEvent) -> None:
        """Deletions are only logged; the rewrite that follows triggers the install."""
        if event.is_directory:
            return

        path = self._match(event.src_path)
        if path is not None:
            self.log.debug("artifact_deleted", path=str(path))

    def on_moved(self, event: FileMovedEvent | DirMovedEvent) -> None:
        """Handle a file renamed onto an artifact path."""
        if event.is_directory:
            return

        # Bundlers often write to a temp file and rename it into place
        path = self._match(event.dest_path)
        if path is None:
            return

        self.log.debug("artifact_moved_into_place", path=str(path))
        self._debouncer.debounce(path, "moved")


class FileWatcher(LoggerMixin):
    """
    Watches plugin build artifacts for changes.

    Uses watchdog for cross-platform file system monitoring with
    debouncing so one build produces one install. Only the parent
    directories of the artifacts are watched, non-recursively.
    """

    def __init__(
        self,
        paths: Iterable[Path],
        on_change: ChangeCallback | None = None,
        debounce_delay_seconds: float = 1.0,
        use_polling: bool = False,
    ) -> None:
        """
        Initialize the file watcher.

        Args:
            paths: Files to watch
            on_change: Callback for batched changes (path, change_type)
            debounce_delay_seconds: Quiet period before on_change runs
            use_polling: Poll instead of using native OS notifications
        """
        self._paths = [_normalize(p) for p in paths]
        if not self._paths:
            raise ValueError("no paths to watch")

        self._use_polling = use_polling
        self._debouncer = Debouncer(
            delay_seconds=debounce_delay_seconds,
            callback=on_change,
        )
        self._handler = ArtifactEventHandler(
            debouncer=self._debouncer,
            paths=self._paths,
        )

        self._observer: BaseObserver | None = None
        self._running = False

    @property
    def directories(self) -> list[Path]:
        """Distinct parent directories of the watched files."""
        return sorted({p.parent for p in self._paths})

    def set_callback(self, callback: ChangeCallback) -> None:
        """Set or update the change callback."""
        self._debouncer.set_callback(callback)

    def start(self) -> None:
        """
        Start watching for file changes.

        Raises:
            WatcherError: If a directory cannot be created or watched
        """
        if self._running:
            return

        observer = PollingObserver() if self._use_polling else Observer()
        for directory in self.directories:
            try:
                # The build may not have created its output directory yet
                directory.mkdir(parents=True, exist_ok=True)
                observer.schedule(self._handler, str(directory), recursive=False)
            except OSError as e:
                raise WatcherError(f"could not watch {directory}: {e}") from e

        # Native observers add their OS watches when started
        try:
            observer.start()
        except OSError as e:
            raise WatcherError(f"could not start file watcher: {e}") from e
        self._observer = observer
        self._running = True

        self.log.info(
            "file_watcher_started",
            paths=[str(p) for p in self._paths],
            polling=self._use_polling,
        )

    def stop(self) -> None:
        """Stop watching and drop any changes that have not fired yet."""
        if not self._running:
            return

        self._debouncer.clear()

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        self._running = False
        self.log.info("file_watcher_stopped")

    def flush(self) -> list[tuple[Path, str]]:
        """Immediately process any pending changes."""
        return self._debouncer.flush()

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    @property
    def pending_count(self) -> int:
        """Get number of pending changes."""
        return self._debouncer.pending_count

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
