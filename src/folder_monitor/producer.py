"""Per-folder watch producer feeding the event channel."""

import logging
import threading
from typing import Callable, List, Optional

from watchdog.events import FileSystemEventHandler

from .cancellation import CancellationToken
from .channel import EventChannel
from .config import MonitorConfig
from .exceptions import ChannelClosedError, OperationCancelledError
from .fs_watcher import FSEventHandler, WatchHandle
from .models import ChangeEvent, FolderSpec, ProducerState

logger = logging.getLogger(__name__)

HandleFactory = Callable[[str, FileSystemEventHandler, bool], WatchHandle]


class WatchProducer:
    """
    Watches one folder and writes its changes to the shared channel.

    State machine: STARTING -> WATCHING -> (CANCELLED | FAILED) -> STOPPED.
    ``run`` never raises; failures are logged and end only this producer.
    """

    def __init__(
        self,
        folder: FolderSpec,
        channel: EventChannel,
        token: CancellationToken,
        config: Optional[MonitorConfig] = None,
        handle_factory: Optional[HandleFactory] = None,
    ):
        """
        Initialize the producer.

        Args:
            folder: Folder to watch
            channel: Channel receiving the normalized events
            token: Cancellation token ending the watch
            config: Monitor configuration (recursion, ignore patterns)
            handle_factory: Builds the scoped watch handle, WatchHandle by default
        """
        self.folder = folder
        self.channel = channel
        self.token = token
        self.config = config or MonitorConfig()
        self._handle_factory = handle_factory or WatchHandle
        self._lock = threading.Lock()
        self._history: List[ProducerState] = [ProducerState.STARTING]
        self._events_produced = 0
        self.error: Optional[Exception] = None

    @property
    def state(self) -> ProducerState:
        with self._lock:
            return self._history[-1]

    @property
    def history(self) -> List[ProducerState]:
        """States visited so far, in order."""
        with self._lock:
            return list(self._history)

    @property
    def events_produced(self) -> int:
        with self._lock:
            return self._events_produced

    def _set_state(self, state: ProducerState) -> None:
        with self._lock:
            self._history.append(state)

    def handle_change(self, event: ChangeEvent) -> Optional[ChangeEvent]:
        """
        Log a detected change and write it to the channel.

        Called on the watchdog dispatcher thread.

        Returns:
            The event written, or None if it was dropped
        """
        try:
            if event.is_rename:
                logger.info(
                    f"Event detected in folder: {self.folder.name}, "
                    f"File: {event.old_file_path} renamed to {event.file_path}"
                )
            else:
                logger.info(
                    f"Event detected in folder: {self.folder.name}, "
                    f"File: {event.file_path}, ChangeType: {event.change_kind.value}"
                )

            self.channel.write(event, self.token)
        except OperationCancelledError:
            logger.debug(f"Write cancelled for folder {self.folder.name}: {event.file_path}")
            return None
        except ChannelClosedError:
            logger.warning(f"Channel closed, dropping event for folder {self.folder.name}: {event.file_path}")
            return None
        except Exception as e:
            logger.error(f"Error handling event for folder: {self.folder.path}. Error: {e}")
            return None

        with self._lock:
            self._events_produced += 1
        return event

    def run(self) -> None:
        """Thread body: watch until cancelled or failed."""
        try:
            handler = FSEventHandler(self.folder.name, self.handle_change, self.config)
            with self._handle_factory(self.folder.path, handler, self.config.recursive):
                self._set_state(ProducerState.WATCHING)
                logger.info(f"Started watching folder: {self.folder.path} and its subdirectories")
                self.token.wait()
                self.token.raise_if_cancelled()
        except OperationCancelledError:
            self._set_state(ProducerState.CANCELLED)
            logger.info(f"Watcher for folder {self.folder.path} was cancelled.")
        except Exception as e:
            self.error = e
            self._set_state(ProducerState.FAILED)
            logger.error(f"Error setting up watcher for folder: {self.folder.path}. Error: {e}")
        finally:
            self._set_state(ProducerState.STOPPED)
