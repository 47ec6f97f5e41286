"""
Unit tests for ThreadingTimerSource.

These tests use real timers with short delays.
"""

from __future__ import annotations

import threading
import time

from invocation_scheduler.config import SchedulerConfig
from invocation_scheduler.exceptions import CallbackError
from invocation_scheduler.scheduler import Scheduler
from invocation_scheduler.timers.threaded import (
    ThreadingTimerSource,
    get_default_timer_source,
)

WAIT_TIMEOUT = 2.0


class TestThreadingTimerSource:
    """Tests for the thread-backed timer source."""

    def test_now_is_monotonic(self) -> None:
        source = ThreadingTimerSource()
        first = source.now()
        assert source.now() >= first

    def test_arm_fires_on_timer_thread(self) -> None:
        source = ThreadingTimerSource()
        fired = threading.Event()
        threads = []

        def on_fire() -> None:
            threads.append(threading.current_thread())
            fired.set()

        source.arm(0.01, on_fire)

        assert fired.wait(WAIT_TIMEOUT)
        assert threads[0] is not threading.current_thread()

    def test_timer_threads_are_daemons(self) -> None:
        handle = ThreadingTimerSource().arm(10.0, lambda: None)
        try:
            assert handle.daemon
        finally:
            handle.cancel()

    def test_disarm_prevents_fire(self) -> None:
        source = ThreadingTimerSource()
        fired = threading.Event()

        handle = source.arm(0.05, fired.set)
        source.disarm(handle)

        assert not fired.wait(0.2)

    def test_error_handler_receives_exceptions(self) -> None:
        errors = []
        done = threading.Event()

        def handler(exc: BaseException) -> None:
            errors.append(exc)
            done.set()

        def boom() -> None:
            raise RuntimeError("boom")

        ThreadingTimerSource(error_handler=handler).arm(0.01, boom)

        assert done.wait(WAIT_TIMEOUT)
        assert isinstance(errors[0], RuntimeError)

    def test_default_source_is_shared(self) -> None:
        assert get_default_timer_source() is get_default_timer_source()


class TestSchedulerOnThreads:
    """End-to-end behavior with real timers."""

    def test_debounce_delivers_latest(self) -> None:
        delivered = threading.Event()
        calls = []

        def callback(value: str) -> None:
            calls.append(value)
            delivered.set()

        with Scheduler(SchedulerConfig.debounce(0.05), callback) as scheduler:
            for value in ("a", "b", "c"):
                scheduler.trigger(value)

            assert delivered.wait(WAIT_TIMEOUT)
            time.sleep(0.1)

        assert calls == ["c"]

    def test_cancel_races_with_fire(self) -> None:
        """cancel() right before the deadline never delivers."""
        calls = []
        scheduler = Scheduler(SchedulerConfig.debounce(0.05), calls.append)

        scheduler.trigger("a")
        scheduler.cancel()
        time.sleep(0.15)

        assert calls == []
        scheduler.close()

    def test_fire_path_errors_reach_error_handler(self) -> None:
        errors = []
        done = threading.Event()

        def handler(exc: BaseException) -> None:
            errors.append(exc)
            done.set()

        def boom(value: str) -> None:
            raise ValueError(value)

        source = ThreadingTimerSource(error_handler=handler)
        with Scheduler(
            SchedulerConfig.debounce(0.01, name="boom"), boom, timer_source=source
        ) as scheduler:
            scheduler.trigger("x")
            assert done.wait(WAIT_TIMEOUT)

        assert isinstance(errors[0], CallbackError)
        assert errors[0].scheduler_name == "boom"
        assert isinstance(errors[0].original, ValueError)

    def test_concurrent_triggers(self) -> None:
        """Triggers from many threads collapse into one delivery."""
        delivered = threading.Event()
        calls = []

        def callback(value: int) -> None:
            calls.append(value)
            delivered.set()

        scheduler = Scheduler(SchedulerConfig.debounce(0.2), callback)

        def worker(start: int) -> None:
            for value in range(start, start + 50):
                scheduler.trigger(value)

        threads = [threading.Thread(target=worker, args=(i * 50,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert delivered.wait(WAIT_TIMEOUT)
        time.sleep(0.3)
        scheduler.close()

        assert len(calls) == 1
        metrics = scheduler.get_metrics()
        assert metrics["triggers"] == 200
        assert metrics["dropped_triggers"] == 199

    def test_trigger_does_not_wait_for_running_callback(self) -> None:
        """A slow trailing callback on the timer thread never blocks trigger()."""
        entered = threading.Event()
        release = threading.Event()
        finished = threading.Event()
        calls = []

        def callback(value: int) -> None:
            calls.append(value)
            if value == 1:
                entered.set()
                release.wait(WAIT_TIMEOUT)
                finished.set()

        with Scheduler(SchedulerConfig.debounce(0.01), callback) as scheduler:
            scheduler.trigger(1)
            assert entered.wait(WAIT_TIMEOUT)

            start = time.perf_counter()
            scheduler.trigger(2)
            blocked = time.perf_counter() - start

            assert not finished.is_set()
            assert blocked < 0.5

            release.set()
            deadline = time.monotonic() + WAIT_TIMEOUT
            while calls != [1, 2] and time.monotonic() < deadline:
                time.sleep(0.01)

        assert calls == [1, 2]
