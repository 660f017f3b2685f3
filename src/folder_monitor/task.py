"""Thread wrapper that records how a pipeline task ended."""

import threading
from typing import Callable, Optional

from .exceptions import OperationCancelledError


class PipelineTask(threading.Thread):
    """
    Daemon thread that captures the exception its target raised.

    The supervisor inspects ``exception`` after joining instead of letting
    errors escape to ``threading.excepthook``.
    """

    def __init__(self, target: Callable[[], None], name: str):
        super().__init__(name=name, daemon=True)
        self._target_fn = target
        self.exception: Optional[Exception] = None

    def run(self) -> None:
        try:
            self._target_fn()
        except Exception as e:
            self.exception = e

    @property
    def was_cancelled(self) -> bool:
        return isinstance(self.exception, OperationCancelledError)

    @property
    def failed(self) -> bool:
        return self.exception is not None and not self.was_cancelled
