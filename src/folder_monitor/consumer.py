"""Fixed-size pool of workers draining the event channel."""

import logging
import threading
from typing import Callable, List, Optional

from .cancellation import CancellationToken
from .channel import EventChannel
from .models import ChangeEvent
from .task import PipelineTask

logger = logging.getLogger(__name__)


def format_event(event: ChangeEvent) -> str:
    """Render a consumed event as a single log line."""
    if event.is_rename:
        return f"Folder: {event.folder_name}, File: {event.old_file_path} renamed to {event.file_path}"
    return f"Folder: {event.folder_name}, File: {event.file_path} {event.change_kind.value}"


def log_event(event: ChangeEvent) -> None:
    logger.info(format_event(event))


class ConsumerPool:
    """
    Workers competing for events on a shared channel.

    Each worker waits for data, drains whatever is immediately available,
    and waits again, until the token is cancelled or the channel is
    complete and empty.
    """

    def __init__(
        self,
        channel: EventChannel,
        token: CancellationToken,
        size: int,
        handler: Optional[Callable[[ChangeEvent], None]] = None,
    ):
        """
        Initialize the consumer pool.

        Args:
            channel: Channel to drain
            token: Cancellation token stopping the workers
            size: Number of worker threads
            handler: Processes one event, logs it by default
        """
        if size < 1:
            raise ValueError(f"Consumer pool size must be at least 1: {size}")

        self.channel = channel
        self.token = token
        self.size = size
        self.handler = handler or log_event
        self._threads: List[PipelineTask] = []
        self._processed = 0
        self._lock = threading.Lock()

    @property
    def processed_count(self) -> int:
        with self._lock:
            return self._processed

    @property
    def threads(self) -> List[PipelineTask]:
        return list(self._threads)

    def _process(self, event: ChangeEvent) -> None:
        try:
            self.handler(event)
        except Exception as e:
            logger.error(f"Error processing event {event.to_dict()}: {e}")
            return

        with self._lock:
            self._processed += 1

    def _worker_loop(self) -> None:
        """Worker loop: wait for data, drain it, repeat."""
        name = threading.current_thread().name
        logger.debug(f"{name} started")

        while self.channel.wait_for_event(self.token):
            while True:
                event = self.channel.try_read()
                if event is None:
                    break
                self._process(event)

        logger.debug(f"{name} stopped, channel complete")

    def start(self) -> List[PipelineTask]:
        """
        Start the worker threads.

        Returns:
            The started threads
        """
        if self._threads:
            raise RuntimeError("Consumer pool already started")

        self._threads = [
            PipelineTask(self._worker_loop, name=f"Consumer-{i}")
            for i in range(self.size)
        ]
        for thread in self._threads:
            thread.start()
        return list(self._threads)
