"""
Folder Monitor Package

Watches a configured set of folders for file system changes and streams
normalized events through a multi-producer/multi-consumer pipeline.

Features:
- One watchdog-backed producer per folder, recursive
- Change events: Created, Modified, Deleted, Renamed
- Unbounded thread-safe event channel
- Fixed-size consumer pool
- Broadcast cancellation with bounded, error-tolerant shutdown
"""

from .models import (
    ChangeKind,
    ChangeEvent,
    FolderSpec,
    ProducerState,
)

from .config import MonitorConfig, load_folder_candidates

from .exceptions import (
    MonitorError,
    ConfigError,
    ConfigNotFoundError,
    InvalidConfigError,
    ChannelError,
    ChannelClosedError,
    OperationCancelledError,
    WatchError,
    MonitorAlreadyRunningError,
)

from .cancellation import CancellationToken
from .channel import EventChannel
from .registry import FolderRegistry
from .fs_watcher import FSEventHandler, WatchHandle
from .producer import WatchProducer
from .consumer import ConsumerPool, format_event
from .task import PipelineTask
from .supervisor import Supervisor


__all__ = [
    # Models
    "ChangeKind",
    "ChangeEvent",
    "FolderSpec",
    "ProducerState",
    # Config
    "MonitorConfig",
    "load_folder_candidates",
    # Exceptions
    "MonitorError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidConfigError",
    "ChannelError",
    "ChannelClosedError",
    "OperationCancelledError",
    "WatchError",
    "MonitorAlreadyRunningError",
    # Components
    "CancellationToken",
    "EventChannel",
    "FolderRegistry",
    "FSEventHandler",
    "WatchHandle",
    "WatchProducer",
    "ConsumerPool",
    "format_event",
    "PipelineTask",
    # Main Process
    "Supervisor",
]

__version__ = "0.1.0"
