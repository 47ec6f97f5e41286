# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for the Invocation Scheduler.

Classes:
    UnifiedMetricsCollector: Metrics collector supporting dict snapshots and Prometheus.

Protocols:
    MetricsCollectorProtocol: Protocol for the sink a scheduler reports to.

Functions:
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.

Constants:
    All metric name constants from constants module.
"""

from .collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    CALLBACK_ERRORS_TOTAL,
    CANCELLATIONS_TOTAL,
    DEFERRAL_BUCKETS,
    DEFERRAL_SECONDS,
    DROPPED_TRIGGERS_TOTAL,
    EDGES,
    FLUSHES_TOTAL,
    INVOCATIONS_TOTAL,
    METRIC_PREFIX,
    PENDING_SCHEDULERS,
    TRIGGERS_TOTAL,
    short_to_prometheus_name,
)
from .protocols import MetricsCollectorProtocol

__all__ = [
    # Counters
    "CALLBACK_ERRORS_TOTAL",
    "CANCELLATIONS_TOTAL",
    # Buckets
    "DEFERRAL_BUCKETS",
    # Histograms
    "DEFERRAL_SECONDS",
    "DROPPED_TRIGGERS_TOTAL",
    "EDGES",
    "FLUSHES_TOTAL",
    "INVOCATIONS_TOTAL",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    # Gauges
    "PENDING_SCHEDULERS",
    "TRIGGERS_TOTAL",
    "MetricDefinition",
    # Protocols
    "MetricsCollectorProtocol",
    # Collector
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
    "short_to_prometheus_name",
]
