"""Configuration for the folder monitor package."""

import fnmatch
import json
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, List, Optional, Union

from .exceptions import ConfigNotFoundError, InvalidConfigError


def _default_consumer_count() -> int:
    return max(1, os.cpu_count() or 1)


@dataclass
class MonitorConfig:
    """
    Configuration options for the folder monitor.

    Attributes:
        config_path: JSON file listing the folders to watch
        consumer_count: Number of consumer workers draining the channel
        join_timeout: Seconds to wait for each task during shutdown
        quit_key: Character that stops the monitor when typed
        recursive: Whether to watch folders recursively
        ignore_patterns: Glob patterns for paths whose changes are dropped
        log_level: Logging level name for the CLI
    """
    config_path: Path = field(default_factory=lambda: Path("folders.json"))
    consumer_count: int = field(default_factory=_default_consumer_count)
    join_timeout: float = 5.0
    quit_key: str = "q"
    recursive: bool = True
    ignore_patterns: List[str] = field(default_factory=list)
    log_level: str = "INFO"

    def __post_init__(self):
        if self.consumer_count < 1:
            raise ValueError(f"consumer_count must be at least 1: {self.consumer_count}")
        if self.join_timeout <= 0:
            raise ValueError(f"join_timeout must be positive: {self.join_timeout}")
        if len(self.quit_key) != 1:
            raise ValueError(f"quit_key must be a single character: {self.quit_key!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "MonitorConfig":
        """
        Build a config from FOLDER_MONITOR_* environment variables.

        Explicit keyword overrides that are not None take precedence.
        """
        values: dict = {}
        if os.environ.get("FOLDER_MONITOR_CONFIG"):
            values["config_path"] = Path(os.environ["FOLDER_MONITOR_CONFIG"])
        if os.environ.get("FOLDER_MONITOR_CONSUMERS"):
            values["consumer_count"] = int(os.environ["FOLDER_MONITOR_CONSUMERS"])
        if os.environ.get("FOLDER_MONITOR_JOIN_TIMEOUT"):
            values["join_timeout"] = float(os.environ["FOLDER_MONITOR_JOIN_TIMEOUT"])
        if os.environ.get("FOLDER_MONITOR_LOG_LEVEL"):
            values["log_level"] = os.environ["FOLDER_MONITOR_LOG_LEVEL"]

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def should_ignore(self, path: Union[str, PurePath]) -> bool:
        """
        Check whether changes to a path are dropped.

        A pattern matches the entry name or the whole path. A pattern
        ending in ``/*`` (``.git/*``) also matches everything below any
        directory whose name matches its stem.

        Args:
            path: Path to check

        Returns:
            True if the path matches an ignore pattern
        """
        path = PurePath(path)
        parents = path.parts[:-1]

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(path.name, pattern) or fnmatch.fnmatch(path.as_posix(), pattern):
                return True
            if pattern.endswith("/*"):
                stem = pattern[:-2]
                if any(fnmatch.fnmatch(part, stem) for part in parents):
                    return True

        return False


def load_folder_candidates(config_path: Path) -> List[Any]:
    """
    Read the raw folder entries from a JSON folder config.

    The document must look like ``{"folders": [{"path": ..., "name": ...}]}``.
    Entries are returned as-is; validation is the registry's job.

    Args:
        config_path: Path to the JSON file

    Returns:
        The list under the ``folders`` key

    Raises:
        ConfigNotFoundError: If the file does not exist
        InvalidConfigError: If the file is unreadable or malformed
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigNotFoundError(f"'{config_path}' file not found.")

    try:
        data: Optional[Any] = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidConfigError(f"Cannot read '{config_path}': {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON format in '{config_path}': {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("folders"), list):
        raise InvalidConfigError(f"Invalid JSON format in '{config_path}': expected a 'folders' list.")

    return data["folders"]
