# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Unified metrics collector backed by dicts and prometheus_client.

This module provides the UnifiedMetricsCollector class that serves as the
single sink for scheduler metrics in the invocation-scheduler library.

Features:
    1. Thread-safe counter/gauge/histogram operations
    2. Prometheus metric registration on first use
    3. Dict-based snapshot for JSON export and tests
    4. Label cardinality protection (max 1000 unique combinations per metric)
    5. Optional HTTP server for Prometheus scraping

Usage:
    >>> from invocation_scheduler.observability.collector import get_metrics_collector
    >>> collector = get_metrics_collector()
    >>> collector.inc_counter('invocation_scheduler_triggers_total',
    ...                       labels={'scheduler': 'search', 'mode': 'debounce'})
    >>> metrics = collector.get_metrics()

Thread Safety:
    All operations are thread-safe. Uses RLock for reentrant locking.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, ClassVar

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from .constants import (
    CALLBACK_ERRORS_TOTAL,
    CANCELLATIONS_TOTAL,
    DEFERRAL_BUCKETS,
    DEFERRAL_SECONDS,
    DROPPED_TRIGGERS_TOTAL,
    FLUSHES_TOTAL,
    INVOCATIONS_TOTAL,
    PENDING_SCHEDULERS,
    TRIGGERS_TOTAL,
)

logger = logging.getLogger(__name__)

# Cap on retained histogram observations per label set
MAX_HISTOGRAM_OBSERVATIONS = 10000


@dataclass
class MetricDefinition:
    """
    Definition for a metric that can be instantiated.

    This dataclass defines the schema for metrics, including their type,
    description, labels, and histogram buckets.
    """

    name: str
    metric_type: str  # 'counter', 'gauge', 'histogram'
    description: str
    label_names: tuple[str, ...] = ()
    buckets: list[float] | None = None


# Pre-defined metrics for the library
METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    # === Counters ===
    TRIGGERS_TOTAL: MetricDefinition(
        TRIGGERS_TOTAL,
        "counter",
        "Total triggers accepted",
        ("scheduler", "mode"),
    ),
    INVOCATIONS_TOTAL: MetricDefinition(
        INVOCATIONS_TOTAL,
        "counter",
        "Total callback invocations",
        ("scheduler", "mode", "edge"),
    ),
    DROPPED_TRIGGERS_TOTAL: MetricDefinition(
        DROPPED_TRIGGERS_TOTAL,
        "counter",
        "Total triggers superseded before delivery",
        ("scheduler", "mode"),
    ),
    CANCELLATIONS_TOTAL: MetricDefinition(
        CANCELLATIONS_TOTAL,
        "counter",
        "Total cancellations that discarded pending work",
        ("scheduler", "mode"),
    ),
    FLUSHES_TOTAL: MetricDefinition(
        FLUSHES_TOTAL,
        "counter",
        "Total forced flushes",
        ("scheduler", "mode"),
    ),
    CALLBACK_ERRORS_TOTAL: MetricDefinition(
        CALLBACK_ERRORS_TOTAL,
        "counter",
        "Total callback invocations that raised",
        ("scheduler", "mode"),
    ),
    # === Gauges ===
    PENDING_SCHEDULERS: MetricDefinition(
        PENDING_SCHEDULERS,
        "gauge",
        "Schedulers holding a live timer",
        ("mode",),
    ),
    # === Histograms ===
    DEFERRAL_SECONDS: MetricDefinition(
        DEFERRAL_SECONDS,
        "histogram",
        "Time from burst start to delivered invocation",
        ("scheduler", "mode"),
        buckets=DEFERRAL_BUCKETS,
    ),
}

_PROMETHEUS_TYPES: dict[str, Any] = {
    "counter": Counter,
    "gauge": Gauge,
    "histogram": Histogram,
}


class UnifiedMetricsCollector:
    """
    Metrics collector keeping a dict snapshot and mirroring into Prometheus.

    Thread Safety:
        All operations use RLock for thread-safe access. The lock is reentrant
        to allow nested calls from callbacks.

    Cardinality Protection:
        To prevent unbounded memory growth, a maximum of MAX_LABEL_COMBINATIONS
        unique label combinations are tracked per metric.

    Example:
        >>> collector = UnifiedMetricsCollector(registry=CollectorRegistry())
        >>> collector.inc_counter('invocation_scheduler_flushes_total',
        ...                       labels={'scheduler': 'search', 'mode': 'debounce'})
        >>> metrics = collector.get_metrics()
    """

    MAX_LABEL_COMBINATIONS: ClassVar[int] = 1000

    def __init__(
        self,
        enable_prometheus: bool = True,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """
        Initialize the metrics collector.

        Args:
            enable_prometheus: Whether to mirror metrics into Prometheus
            registry: Optional Prometheus CollectorRegistry (tests pass a
                private one to avoid clashing with the default registry)
        """
        self._enable_prometheus = enable_prometheus
        self._registry = registry if registry is not None else REGISTRY

        # Dict-based metrics (always available)
        self._counters: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._gauges: dict[str, dict[str, float]] = defaultdict(
            lambda: defaultdict(float)
        )
        self._histograms: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )

        self._lock = threading.RLock()

        # Prometheus metric instances, keyed by (metric_type, name)
        self._prom_metrics: dict[tuple[str, str], Any] = {}

        self._label_combinations: dict[str, set[str]] = defaultdict(set)

        self._server_running = False

        logger.debug(
            f"UnifiedMetricsCollector initialized "
            f"(prometheus={'enabled' if self._enable_prometheus else 'disabled'})"
        )

    def _labels_to_key(self, labels: dict[str, str] | None) -> str:
        """Convert labels dict to a stable string key."""
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def _check_cardinality(self, name: str, label_key: str) -> bool:
        """
        Check if adding this label combination would exceed cardinality limit.

        Returns:
            True if the label combination is allowed, False otherwise
        """
        if label_key in self._label_combinations[name]:
            return True
        if len(self._label_combinations[name]) >= self.MAX_LABEL_COMBINATIONS:
            logger.warning(
                f"Cardinality limit ({self.MAX_LABEL_COMBINATIONS}) reached "
                f"for metric {name}. Dropping label combination: {label_key}"
            )
            return False
        self._label_combinations[name].add(label_key)
        return True

    def _get_or_create_prom_metric(
        self, metric_type: str, name: str, labels: dict[str, str] | None
    ) -> Any | None:
        """Get or lazily register the Prometheus metric for ``name``."""
        if not self._enable_prometheus:
            return None

        key = (metric_type, name)
        with self._lock:
            if key in self._prom_metrics:
                return self._prom_metrics[key]

            defn = METRIC_DEFINITIONS.get(name)
            if defn is not None and defn.metric_type == metric_type:
                description = defn.description
                label_names = list(defn.label_names)
                buckets = defn.buckets
            else:
                # Dynamic metric (not pre-defined); labels fixed by first use
                description = f"Dynamic {metric_type}: {name}"
                label_names = sorted(labels) if labels else []
                buckets = None

            kwargs: dict[str, Any] = {"registry": self._registry}
            if metric_type == "histogram":
                kwargs["buckets"] = buckets or DEFERRAL_BUCKETS

            try:
                metric = _PROMETHEUS_TYPES[metric_type](
                    name, description, label_names, **kwargs
                )
            except ValueError as e:
                # Duplicate registration in a shared registry
                logger.warning(f"Failed to create Prometheus {metric_type} {name}: {e}")
                metric = None

            self._prom_metrics[key] = metric
            return metric

    def _apply_prom(
        self,
        metric_type: str,
        name: str,
        labels: dict[str, str] | None,
        method: str,
        value: float,
    ) -> None:
        metric = self._get_or_create_prom_metric(metric_type, name, labels)
        if metric is None:
            return
        try:
            target = metric.labels(**labels) if labels else metric
            getattr(target, method)(value)
        except (ValueError, KeyError) as e:
            logger.debug(f"Prometheus {metric_type} {method} failed for {name}: {e}")

    # === Counter Operations ===

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Raises:
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Counter increment must be non-negative")

        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._counters[name][label_key] += value

        self._apply_prom("counter", name, labels, "inc", value)

    # === Gauge Operations ===

    def set_gauge(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to a specific value."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._gauges[name][label_key] = value

        self._apply_prom("gauge", name, labels, "set", value)

    def inc_gauge(
        self,
        name: str,
        value: float = 1.0,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Increment a gauge metric."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._gauges[name][label_key] += value

        self._apply_prom("gauge", name, labels, "inc", value)

    def dec_gauge(
        self,
        name: str,
        value: float = 1.0,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Decrement a gauge metric."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._gauges[name][label_key] -= value

        self._apply_prom("gauge", name, labels, "dec", value)

    # === Histogram Operations ===

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record an observation in a histogram."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            observations = self._histograms[name][label_key]
            observations.append(value)
            if len(observations) > MAX_HISTOGRAM_OBSERVATIONS:
                del observations[: len(observations) - MAX_HISTOGRAM_OBSERVATIONS // 2]

        self._apply_prom("histogram", name, labels, "observe", value)

    # === Snapshot Operations ===

    def get_metrics(self) -> dict[str, Any]:
        """
        Get a snapshot of all metrics.

        Returns a dict suitable for JSON serialization with structure:
        {
            "counters": {"metric_name": {"label_key": value, ...}, ...},
            "gauges": {"metric_name": {"label_key": value, ...}, ...},
            "histograms": {"metric_name": {"label_key": {...}, ...}, ...}
        }
        """
        with self._lock:
            counters = {
                name: dict(label_values)
                for name, label_values in self._counters.items()
            }
            gauges = {
                name: dict(label_values) for name, label_values in self._gauges.items()
            }

            histograms: dict[str, dict[str, dict[str, Any]]] = {}
            for name, label_values in self._histograms.items():
                histograms[name] = {}
                for label_key, observations in label_values.items():
                    if observations:
                        histograms[name][label_key] = {
                            "count": len(observations),
                            "sum": sum(observations),
                            "avg": sum(observations) / len(observations),
                            "min": min(observations),
                            "max": max(observations),
                        }

        return {
            "counters": counters,
            "gauges": gauges,
            "histograms": histograms,
        }

    def get_flat_metrics(self) -> dict[str, Any]:
        """
        Get counters and gauges in a flat dict.

        Labeled metrics use the format "metric_name{label=value,...}".
        """
        result: dict[str, Any] = {}

        with self._lock:
            for store in (self._counters, self._gauges):
                for name, label_values in store.items():
                    for label_key, value in label_values.items():
                        key = f"{name}{{{label_key}}}" if label_key else name
                        result[key] = value

        return result

    # === Lifecycle ===

    def reset(self) -> None:
        """Reset all dict-based metrics to zero."""
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._histograms.clear()
            self._label_combinations.clear()

        logger.debug("Metrics collector reset")

    # === Prometheus HTTP Server ===

    def start_http_server(self, host: str = "127.0.0.1", port: int = 9090) -> bool:
        """
        Start the Prometheus HTTP server for metrics scraping.

        Args:
            host: Host to bind to (default: 127.0.0.1 for localhost only)
            port: Port to bind to

        Returns:
            True if the server is running after the call, False otherwise
        """
        if self._server_running:
            logger.warning("Prometheus server already running")
            return True

        try:
            # start_http_server runs in a daemon thread
            start_http_server(port, addr=host, registry=self._registry)
        except OSError as e:
            logger.error(f"Failed to start Prometheus server: {e}")
            return False

        self._server_running = True
        logger.info(f"Prometheus metrics server started on {host}:{port}")
        return True

    @property
    def prometheus_enabled(self) -> bool:
        """Check if Prometheus metrics are enabled."""
        return self._enable_prometheus

    @property
    def server_running(self) -> bool:
        """Check if the Prometheus HTTP server is running."""
        return self._server_running


# =============================================================================
# Singleton Pattern
# =============================================================================

_global_collector: UnifiedMetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector(
    enable_prometheus: bool = True,
) -> UnifiedMetricsCollector:
    """
    Get or create the global metrics collector singleton.

    Args:
        enable_prometheus: Whether to enable Prometheus metrics
            (only used on first call)
    """
    global _global_collector

    if _global_collector is None:
        with _collector_lock:
            if _global_collector is None:
                _global_collector = UnifiedMetricsCollector(
                    enable_prometheus=enable_prometheus
                )

    return _global_collector


def reset_metrics_collector() -> None:
    """
    Reset the global metrics collector singleton (mainly for testing).

    Prometheus metrics already registered in the default registry stay
    registered; a new collector will log a warning and keep dict metrics only.
    """
    global _global_collector
    with _collector_lock:
        if _global_collector:
            _global_collector.reset()
        _global_collector = None


__all__ = [
    "METRIC_DEFINITIONS",
    "MetricDefinition",
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
