"""Custom exceptions for the folder monitor package."""


class MonitorError(Exception):
    """Base exception for all folder monitor errors."""
    pass


class ConfigError(MonitorError):
    """The folder config cannot be used. Fatal for a run."""
    pass


class ConfigNotFoundError(ConfigError):
    """The folder config file does not exist."""
    pass


class InvalidConfigError(ConfigError):
    """The folder config file is unreadable or structurally invalid."""
    pass


class ChannelError(MonitorError):
    """Error related to the event channel."""
    pass


class ChannelClosedError(ChannelError):
    """Write attempted after the channel was completed."""
    pass


class OperationCancelledError(MonitorError):
    """A wait or write was interrupted by the cancellation token."""
    pass


class WatchError(MonitorError):
    """An OS-level watch could not be acquired."""
    pass


class MonitorAlreadyRunningError(MonitorError):
    """Supervisor is already running."""
    pass
