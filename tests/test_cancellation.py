"""Tests for cancellation module."""

import pytest
import threading
import time

from folder_monitor.cancellation import CancellationToken
from folder_monitor.exceptions import OperationCancelledError


class TestCancellationToken:
    """Tests for CancellationToken class."""

    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert token.is_cancelled is False
        token.raise_if_cancelled()

    def test_cancel(self):
        token = CancellationToken()
        assert token.cancel() is True
        assert token.is_cancelled is True

    def test_cancel_is_idempotent(self):
        token = CancellationToken()
        assert token.cancel() is True
        assert token.cancel() is False
        assert token.cancel() is False
        assert token.is_cancelled is True

    def test_raise_if_cancelled(self):
        token = CancellationToken.cancelled()
        with pytest.raises(OperationCancelledError):
            token.raise_if_cancelled()

    def test_wait_timeout(self):
        token = CancellationToken()
        assert token.wait(timeout=0.05) is False

    def test_wait_wakes_on_cancel(self):
        token = CancellationToken()
        results = []

        def waiter():
            results.append(token.wait(timeout=5.0))

        threads = [threading.Thread(target=waiter) for _ in range(3)]
        for t in threads:
            t.start()

        time.sleep(0.05)
        token.cancel()

        for t in threads:
            t.join(timeout=2.0)

        assert results == [True, True, True]

    def test_callbacks_run_once(self):
        token = CancellationToken()
        calls = []
        token.register(lambda: calls.append("a"))
        token.register(lambda: calls.append("b"))

        token.cancel()
        token.cancel()

        assert calls == ["a", "b"]

    def test_register_after_cancel_runs_immediately(self):
        token = CancellationToken.cancelled()
        calls = []

        token.register(lambda: calls.append("late"))

        assert calls == ["late"]

    def test_failing_callback_does_not_block_others(self):
        token = CancellationToken()
        calls = []

        def boom():
            raise RuntimeError("boom")

        token.register(boom)
        token.register(lambda: calls.append("ok"))

        assert token.cancel() is True
        assert calls == ["ok"]

    def test_concurrent_cancel_reports_single_winner(self):
        token = CancellationToken()
        results = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def cancel():
            barrier.wait()
            won = token.cancel()
            with lock:
                results.append(won)

        threads = [threading.Thread(target=cancel) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count(False) == 7

    def test_cancel_reenters_on_lock_holding_thread(self):
        # A signal handler runs on the main thread, possibly inside cancel() or register()
        token = CancellationToken()
        calls = []
        token.register(lambda: calls.append("cb"))
        results = []

        def interrupted():
            with token._lock:
                results.append(token.cancel())

        thread = threading.Thread(target=interrupted)
        thread.start()
        thread.join(timeout=2.0)

        assert not thread.is_alive()
        assert results == [True]
        assert token.is_cancelled
        assert calls == ["cb"]
