"""Data models for the folder monitor package."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import time


class ChangeKind(Enum):
    """Kinds of normalized file system changes."""
    CREATED = "Created"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"


class ProducerState(Enum):
    """Lifecycle states of a watch producer."""
    STARTING = "starting"
    WATCHING = "watching"
    CANCELLED = "cancelled"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class FolderSpec:
    """
    A folder to watch, as described by the folder config.

    Attributes:
        path: Directory to watch (recursively)
        name: Display name used to tag events from this folder
    """
    path: str
    name: str


@dataclass(frozen=True)
class ChangeEvent:
    """
    A normalized change detected under a watched folder.

    Attributes:
        folder_name: Name of the folder the change was observed in
        file_path: Full path of the affected entry (new path for renames)
        change_kind: What happened to the entry
        old_file_path: Previous full path, only for RENAMED events
        timestamp: Unix timestamp when the event was constructed
    """
    folder_name: str
    file_path: str
    change_kind: ChangeKind
    old_file_path: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.change_kind is ChangeKind.RENAMED:
            if not self.old_file_path:
                raise ValueError(f"RENAMED event requires old_file_path: {self.file_path}")
        elif self.old_file_path is not None:
            raise ValueError(
                f"old_file_path is only allowed for RENAMED events, got {self.change_kind.value}"
            )

    @property
    def is_rename(self) -> bool:
        return self.change_kind is ChangeKind.RENAMED

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and inspection."""
        return {
            "folder_name": self.folder_name,
            "file_path": self.file_path,
            "change_kind": self.change_kind.value,
            "old_file_path": self.old_file_path,
            "timestamp": self.timestamp,
        }
