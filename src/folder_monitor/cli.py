#!/usr/bin/env python3
"""
CLI for running the folder monitor.

Usage:
    folder-monitor --config folders.json
    python -m folder_monitor --config folders.json --consumers 4 --ignore "*.tmp"
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional, TextIO

from dotenv import load_dotenv

from .cancellation import CancellationToken
from .config import MonitorConfig
from .supervisor import Supervisor

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("folder_monitor.cli")


class GracefulShutdown:
    """Cancel the token on SIGINT/SIGTERM."""

    def __init__(self, token: CancellationToken):
        self.token = token
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.token.cancel()


class QuitListener:
    """
    Cancel the token when the quit key is read from a stream.

    The stream is read on a daemon thread, so the process never waits on
    the console. End of input only ends the listener, it does not stop
    the monitor.
    """

    def __init__(self, token: CancellationToken, quit_key: str = "q", stream: Optional[TextIO] = None):
        self.token = token
        self.quit_key = quit_key
        self.stream = stream if stream is not None else sys.stdin
        self._thread: Optional[threading.Thread] = None

    def _listen(self) -> None:
        while not self.token.is_cancelled:
            char = self.stream.read(1)
            if not char:
                logger.info(f"Input closed; quit key '{self.quit_key}' is no longer available, use Ctrl+C to stop.")
                return
            if char == self.quit_key:
                self.token.cancel()
                return

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self._listen, name="QuitListener", daemon=True)
        self._thread.start()
        return self._thread


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folder-monitor",
        description="Watch folders for changes and log them through a producer/consumer pipeline",
    )
    parser.add_argument("--config", type=Path, help="JSON folder config (default: folders.json)")
    parser.add_argument("--consumers", type=int, help="Number of consumer workers (default: CPU count)")
    parser.add_argument("--join-timeout", type=float, help="Seconds to wait for each task on shutdown")
    parser.add_argument("--quit-key", help="Key that stops the monitor (default: q)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument(
        "--ignore",
        action="append",
        metavar="PATTERN",
        help="Glob pattern of paths to ignore (repeatable)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = MonitorConfig.from_env(
            config_path=args.config,
            consumer_count=args.consumers,
            join_timeout=args.join_timeout,
            quit_key=args.quit_key,
            log_level=args.log_level,
            ignore_patterns=args.ignore,
        )
    except ValueError as e:
        setup_logging("INFO")
        logger.error(f"Invalid configuration: {e}")
        return 2

    setup_logging(config.log_level)

    token = CancellationToken()

    def listen_for_quit() -> None:
        GracefulShutdown(token)
        QuitListener(token, config.quit_key).start()

    return Supervisor(config=config, token=token).run(on_ready=listen_for_quit)


if __name__ == "__main__":
    sys.exit(main())
