"""Thread-safe unbounded event channel connecting producers to consumers."""

import threading
from collections import deque
from typing import Deque, Optional, Set

from .cancellation import CancellationToken
from .exceptions import ChannelClosedError, OperationCancelledError
from .models import ChangeEvent


class EventChannel:
    """
    Unbounded multi-producer/multi-consumer FIFO of change events.

    Features:
    - Non-blocking writes from any number of threads
    - Readers suspend until data, completion, or cancellation
    - Each event is handed to exactly one reader
    - Completion lets readers drain and then stop
    """

    def __init__(self):
        self._items: Deque[ChangeEvent] = deque()
        self._cond = threading.Condition()
        self._complete = False
        self._tokens: Set[CancellationToken] = set()

    def _wake_all(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def _observe(self, token: CancellationToken) -> None:
        """Make sure cancelling ``token`` wakes readers blocked on this channel."""
        with self._cond:
            if token in self._tokens:
                return
            self._tokens.add(token)
        token.register(self._wake_all)

    def write(self, event: ChangeEvent, token: Optional[CancellationToken] = None) -> None:
        """
        Append an event to the channel.

        Args:
            event: Event to enqueue
            token: Cancellation token observed by the write

        Raises:
            OperationCancelledError: If the token is cancelled; nothing is enqueued
            ChannelClosedError: If the channel has been completed
        """
        if token is not None:
            token.raise_if_cancelled()

        with self._cond:
            if self._complete:
                raise ChannelClosedError("Channel is complete")
            self._items.append(event)
            self._cond.notify()

    def wait_for_event(self, token: Optional[CancellationToken] = None) -> bool:
        """
        Block until an event can be read.

        Args:
            token: Cancellation token that interrupts the wait

        Returns:
            True if an event is available, False if the channel is
            complete and fully drained

        Raises:
            OperationCancelledError: If the token is cancelled
        """
        if token is not None:
            self._observe(token)

        with self._cond:
            while True:
                if token is not None and token.is_cancelled:
                    raise OperationCancelledError("Wait for event was cancelled")
                if self._items:
                    return True
                if self._complete:
                    return False
                self._cond.wait()

    def try_read(self) -> Optional[ChangeEvent]:
        """
        Remove and return the oldest event without blocking.

        Returns:
            The event, or None if the channel is currently empty
        """
        with self._cond:
            if self._items:
                return self._items.popleft()
            return None

    def complete(self) -> None:
        """Mark that no more events will be written. Idempotent."""
        with self._cond:
            self._complete = True
            self._cond.notify_all()

    @property
    def is_complete(self) -> bool:
        with self._cond:
            return self._complete

    def __len__(self) -> int:
        """Return the number of events waiting to be read."""
        with self._cond:
            return len(self._items)
