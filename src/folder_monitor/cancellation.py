"""Broadcast cancellation token shared by every pipeline task."""

import logging
import threading
from typing import Callable, List, Optional

from .exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Single-shot, irreversible cancellation signal.

    Once cancelled the token stays cancelled. Every long-lived wait in the
    pipeline observes it through ``wait`` or ``raise_if_cancelled``.
    """

    def __init__(self):
        self._event = threading.Event()
        # cancel() can re-enter from a signal handler on the thread holding the lock
        self._lock = threading.RLock()
        self._callbacks: List[Callable[[], None]] = []

    def cancel(self) -> bool:
        """
        Trigger cancellation.

        Returns:
            True on the first call, False if the token was already cancelled
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Cancellation callback failed: {e}")
        return True

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until cancelled or the timeout elapses.

        Returns:
            True if the token is cancelled
        """
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if the token is cancelled."""
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")

    def register(self, callback: Callable[[], None]) -> None:
        """
        Run a callback once on cancellation.

        If the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    @classmethod
    def cancelled(cls) -> "CancellationToken":
        """Create a token that is already cancelled."""
        token = cls()
        token.cancel()
        return token
