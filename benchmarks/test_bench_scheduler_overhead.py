"""
Benchmark: Scheduler Overhead

Measures the per-trigger cost of the scheduling machinery for each mode.
Timers come from a ManualTimerSource, so the numbers exclude thread and
event-loop latency.

Usage:
    pytest benchmarks/test_bench_scheduler_overhead.py -v --no-cov -s
"""

import threading
import time

import pytest

from invocation_scheduler import Scheduler, SchedulerConfig
from invocation_scheduler.observability.collector import UnifiedMetricsCollector
from invocation_scheduler.timers.threaded import ThreadingTimerSource


def _report(title: str, iterations: int, elapsed: float) -> float:
    avg_us = (elapsed / iterations) * 1_000_000
    print(f"\n--- {title} ---")
    print(f"Iterations: {iterations}")
    print(f"Total time: {elapsed:.4f}s")
    print(f"Average latency: {avg_us:.2f}us per trigger")
    print(f"Throughput: {iterations / elapsed:.1f} ops/sec")
    return avg_us


class TestTriggerOverhead:
    """Benchmark trigger() cost for each mode."""

    @pytest.mark.parametrize(
        "config",
        [
            SchedulerConfig.debounce(1.0),
            SchedulerConfig.debounce(1.0, max_wait=2.0),
            SchedulerConfig.throttle(1.0),
        ],
        ids=["debounce", "debounce-max-wait", "throttle"],
    )
    def test_burst_trigger_overhead(self, clock, counting_callback, config):
        """
        Measure trigger() inside one long burst.

        Every trigger re-arms (debounce) or replaces the pending call
        (throttle), which is the hot path of a busy input source.
        """
        scheduler = Scheduler(config, counting_callback, timer_source=clock)

        # Warmup
        for i in range(100):
            scheduler.trigger(i)

        iterations = 10_000
        start = time.perf_counter()
        for i in range(iterations):
            scheduler.trigger(i)
        elapsed = time.perf_counter() - start

        avg_us = _report(f"{config.mode.value} burst", iterations, elapsed)
        scheduler.close()

        # Should stay well under 100us per trigger
        assert avg_us < 100, f"Overhead too high: {avg_us:.2f}us"

    def test_metrics_collector_overhead(self, clock, counting_callback):
        """Measure the extra cost of mirroring counters into a collector."""
        scheduler = Scheduler(
            SchedulerConfig.debounce(1.0),
            counting_callback,
            timer_source=clock,
            metrics_collector=UnifiedMetricsCollector(enable_prometheus=False),
        )

        iterations = 10_000
        start = time.perf_counter()
        for i in range(iterations):
            scheduler.trigger(i)
        elapsed = time.perf_counter() - start

        avg_us = _report("debounce burst with collector", iterations, elapsed)
        scheduler.close()

        assert avg_us < 200, f"Overhead too high: {avg_us:.2f}us"

    def test_interval_tick_overhead(self, clock, counting_callback):
        """Measure the fire path: one interval tick per advance."""
        scheduler = Scheduler(
            SchedulerConfig.interval(0.5), counting_callback, timer_source=clock
        )
        scheduler.start()

        iterations = 5_000
        start = time.perf_counter()
        clock.advance(iterations * 0.5)
        elapsed = time.perf_counter() - start

        _report("interval ticks", iterations, elapsed)
        scheduler.close()

        assert counting_callback.count == iterations


class TestConcurrentTriggers:
    """Benchmark lock contention with real threads."""

    @pytest.mark.parametrize("num_threads", [1, 4, 16])
    def test_contended_triggers(self, counting_callback, num_threads):
        """Many threads triggering one debounced scheduler."""
        scheduler = Scheduler(
            SchedulerConfig.debounce(60.0),
            counting_callback,
            timer_source=ThreadingTimerSource(),
        )
        per_thread = 500

        def worker() -> None:
            for i in range(per_thread):
                scheduler.trigger(i)

        threads = [threading.Thread(target=worker) for _ in range(num_threads)]
        start = time.perf_counter()
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        elapsed = time.perf_counter() - start

        total = per_thread * num_threads
        _report(f"{num_threads} threads", total, elapsed)

        assert scheduler.get_metrics()["triggers"] == total
        scheduler.close()
        assert counting_callback.count == 0
