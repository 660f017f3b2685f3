"""Validation and thread-safe storage of the folders to watch."""

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

from .models import FolderSpec

logger = logging.getLogger(__name__)


class FolderRegistry:
    """
    Thread-safe registry of usable watch targets.

    Invalid candidates are logged and skipped; they never fail the
    registry as a whole.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._folders: List[FolderSpec] = []
        self._lock = threading.RLock()

    @staticmethod
    def _coerce(candidate: Any) -> Optional[FolderSpec]:
        """Build a FolderSpec from a config entry, or None if fields are missing."""
        if isinstance(candidate, FolderSpec):
            path, name = candidate.path, candidate.name
        elif isinstance(candidate, Mapping):
            path, name = candidate.get("path"), candidate.get("name")
        else:
            return None

        if not isinstance(path, str) or not isinstance(name, str):
            return None
        if not path or not name:
            return None
        return FolderSpec(path=path, name=name)

    def register(self, candidate: Any) -> Optional[FolderSpec]:
        """
        Validate a folder candidate and keep it if usable.

        Args:
            candidate: A mapping with ``path`` and ``name`` keys, or a FolderSpec

        Returns:
            The registered FolderSpec, or None if the candidate was skipped
        """
        folder = self._coerce(candidate)
        if folder is None:
            logger.error(f"Invalid folder entry in config: {candidate!r}")
            return None

        if not Path(folder.path).is_dir():
            logger.warning(f"The directory '{folder.path}' does not exist. Skipping.")
            return None

        with self._lock:
            self._folders.append(folder)
        return folder

    def load(self, candidates: Iterable[Any]) -> List[FolderSpec]:
        """
        Register every candidate in order.

        Args:
            candidates: Raw folder entries from the config

        Returns:
            The usable folders, in input order
        """
        registered = []
        for candidate in candidates:
            folder = self.register(candidate)
            if folder is not None:
                registered.append(folder)
        return registered

    def get_folders(self) -> List[FolderSpec]:
        """
        Get the registered folders.

        Returns:
            A copy of the registered folder list
        """
        with self._lock:
            return list(self._folders)

    def __len__(self) -> int:
        with self._lock:
            return len(self._folders)

    def __iter__(self) -> Iterator[FolderSpec]:
        return iter(self.get_folders())
