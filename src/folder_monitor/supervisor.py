"""Lifecycle supervisor for the producer/consumer pipeline."""

import logging
import threading
from typing import Callable, List, Optional

from .cancellation import CancellationToken
from .channel import EventChannel
from .config import MonitorConfig, load_folder_candidates
from .consumer import ConsumerPool
from .exceptions import ConfigError, MonitorAlreadyRunningError
from .models import ChangeEvent, FolderSpec
from .producer import HandleFactory, WatchProducer
from .registry import FolderRegistry
from .task import PipelineTask

logger = logging.getLogger(__name__)


class Supervisor:
    """
    Main orchestrator for the folder monitor.

    Loads the folder config, runs one producer per folder and a pool of
    consumers against a shared channel, and shuts everything down when
    the cancellation token fires.
    """

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        token: Optional[CancellationToken] = None,
        handler: Optional[Callable[[ChangeEvent], None]] = None,
        handle_factory: Optional[HandleFactory] = None,
    ):
        """
        Initialize the supervisor.

        Args:
            config: Monitor configuration
            token: Cancellation token, a fresh one by default
            handler: Consumer-side event processing, logging by default
            handle_factory: Builds the producers' watch handles
        """
        self.config = config or MonitorConfig()
        self.token = token or CancellationToken()
        self.registry = FolderRegistry()
        self.channel = EventChannel()

        self._handler = handler
        self._handle_factory = handle_factory
        self._producers: List[WatchProducer] = []
        self._producer_tasks: List[PipelineTask] = []
        self._consumer_pool: Optional[ConsumerPool] = None
        self._running = False
        self._lock = threading.Lock()

    @property
    def producers(self) -> List[WatchProducer]:
        return list(self._producers)

    @property
    def producer_tasks(self) -> List[PipelineTask]:
        return list(self._producer_tasks)

    @property
    def consumer_pool(self) -> Optional[ConsumerPool]:
        return self._consumer_pool

    @property
    def is_running(self) -> bool:
        return self._running

    def load_folders(self) -> List[FolderSpec]:
        """
        Load the folder config and register the usable folders.

        Returns:
            Folders that passed validation

        Raises:
            ConfigError: If the config is missing or malformed
        """
        candidates = load_folder_candidates(self.config.config_path)
        folders = self.registry.load(candidates)
        logger.info(f"Loaded {len(folders)} of {len(candidates)} folder(s) from {self.config.config_path}")
        return folders

    def start(self, folders: Optional[List[FolderSpec]] = None) -> None:
        """
        Spawn the producers and the consumer pool (non-blocking).

        Args:
            folders: Folders to watch, loaded from the config if omitted

        Raises:
            MonitorAlreadyRunningError: If already running
            ConfigError: If folders are omitted and the config is unusable
        """
        with self._lock:
            if self._running:
                raise MonitorAlreadyRunningError("Monitor is already running")
            self._running = True

        try:
            if folders is None:
                folders = self.load_folders()

            for folder in folders:
                producer = WatchProducer(
                    folder,
                    self.channel,
                    self.token,
                    self.config,
                    handle_factory=self._handle_factory,
                )
                task = PipelineTask(producer.run, name=f"Producer-{folder.name}")
                self._producers.append(producer)
                self._producer_tasks.append(task)
                task.start()

            self._consumer_pool = ConsumerPool(
                self.channel,
                self.token,
                self.config.consumer_count,
                handler=self._handler,
            )
            self._consumer_pool.start()
        except Exception:
            with self._lock:
                self._running = False
            raise

        logger.info(
            f"Monitor running with {len(self._producer_tasks)} producer(s) "
            f"and {self.config.consumer_count} consumer(s)"
        )

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the token is cancelled.

        Returns:
            True if cancelled, False if the timeout elapsed
        """
        return self.token.wait(timeout)

    def stop(self) -> None:
        """
        Cancel the token and shut the pipeline down.

        Safe to call more than once.
        """
        if self.token.cancel():
            logger.info("Stopping monitor...")
        self._shutdown()

    def _shutdown(self) -> None:
        """Internal shutdown procedure."""
        with self._lock:
            if not self._running:
                return
            self._running = False

        self._join_tasks(self._producer_tasks, "producer")
        self.channel.complete()
        if self._consumer_pool is not None:
            self._join_tasks(self._consumer_pool.threads, "consumer")

        logger.info("Monitor stopped")

    def _join_tasks(self, tasks: List[PipelineTask], kind: str) -> None:
        """Join every task with a bounded wait, logging failures without re-raising."""
        for task in tasks:
            task.join(timeout=self.config.join_timeout)
            if task.is_alive():
                logger.warning(f"{kind.capitalize()} task {task.name} did not finish within {self.config.join_timeout}s")
            elif task.failed:
                logger.error(f"{kind.capitalize()} task {task.name} failed: {task.exception}")
            elif task.was_cancelled:
                logger.debug(f"{kind.capitalize()} task {task.name} cancelled")

    def run(self, on_ready: Optional[Callable[[], None]] = None) -> int:
        """
        Run the monitor until the token is cancelled (blocking).

        Args:
            on_ready: Called once the config has loaded and the pipeline is
                running; not called when the config is missing or invalid

        Returns:
            Process exit code: 0 on normal shutdown, 1 on a config error
        """
        try:
            folders = self.load_folders()
        except ConfigError as e:
            logger.error(f"Error: {e}")
            return 1

        self.start(folders)
        logger.info(f"Press '{self.config.quit_key}' to quit.")

        try:
            if on_ready is not None:
                on_ready()
            self.wait()
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
        return 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
