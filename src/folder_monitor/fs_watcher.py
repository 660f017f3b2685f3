"""File system watching using the watchdog library."""

import logging
import os
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent

from .config import MonitorConfig
from .exceptions import WatchError
from .models import ChangeEvent, ChangeKind

logger = logging.getLogger(__name__)


class FSEventHandler(FileSystemEventHandler):
    """
    Turns watchdog notifications for one folder into change events.

    Files and directories are reported alike. Moves whose destination
    is outside the watch arrive from watchdog as deletes.
    """

    def __init__(
        self,
        folder_name: str,
        callback: Callable[[ChangeEvent], None],
        config: Optional[MonitorConfig] = None,
    ):
        super().__init__()
        self.folder_name = folder_name
        self.callback = callback
        self.config = config or MonitorConfig()

    def _ignored(self, *paths: str) -> bool:
        return any(self.config.should_ignore(p) for p in paths)

    def _notify(self, kind: ChangeKind, event: FileSystemEvent) -> None:
        path = os.fsdecode(event.src_path)
        if not self._ignored(path):
            self.callback(ChangeEvent(self.folder_name, path, kind))

    def on_created(self, event):
        self._notify(ChangeKind.CREATED, event)

    def on_deleted(self, event):
        self._notify(ChangeKind.DELETED, event)

    def on_modified(self, event):
        self._notify(ChangeKind.MODIFIED, event)

    def on_moved(self, event: FileSystemMovedEvent):
        old_path = os.fsdecode(event.src_path)
        new_path = os.fsdecode(event.dest_path or "")
        if not new_path or self._ignored(old_path, new_path):
            return
        self.callback(ChangeEvent(self.folder_name, new_path, ChangeKind.RENAMED, old_file_path=old_path))


class WatchHandle:
    """
    Scoped OS-level watch on one directory tree.

    Use as a context manager: the observer is started on entry and is
    always stopped and joined on exit, including on errors.
    """

    def __init__(
        self,
        path: str,
        handler: FileSystemEventHandler,
        recursive: bool = True,
        stop_timeout: float = 5.0,
    ):
        """
        Initialize the watch handle.

        Args:
            path: Directory to watch
            handler: watchdog handler receiving the raw notifications
            recursive: Whether to include subdirectories
            stop_timeout: Seconds to wait for the observer thread on release
        """
        self.path = path
        self.handler = handler
        self.recursive = recursive
        self.stop_timeout = stop_timeout
        self._observer: Optional[Observer] = None

    def open(self) -> None:
        """
        Start watching.

        Raises:
            WatchError: If the directory cannot be watched
        """
        if self._observer is not None:
            return

        if not os.path.isdir(self.path):
            raise WatchError(f"Not a directory: {self.path}")

        observer = Observer()
        try:
            observer.schedule(self.handler, self.path, recursive=self.recursive)
            observer.start()
        except OSError as e:
            observer.unschedule_all()
            raise WatchError(f"Cannot watch {self.path}: {e}") from e

        self._observer = observer

    def close(self) -> None:
        """Stop watching and release the observer. Idempotent."""
        observer, self._observer = self._observer, None
        if observer is None:
            return

        observer.stop()
        observer.join(timeout=self.stop_timeout)
        if observer.is_alive():
            logger.warning(f"Observer for {self.path} did not stop within {self.stop_timeout}s")

    @property
    def is_open(self) -> bool:
        return self._observer is not None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
