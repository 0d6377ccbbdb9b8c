#!/usr/bin/env python3
"""
Metrics Collector with Prometheus Exposition

This module records the outcome of every completed request and renders the
aggregate in the Prometheus text exposition format:
- Request and error counters
- Latency summary (p50/p90/p95/p99) over a bounded ring of recent samples
- Process memory/CPU and event loop lag gauges
- Per-status and per-endpoint breakdowns

Architectural Decision: prometheus-client for the exposition format
- Families are produced by a custom collector registered on a private
  CollectorRegistry, so each MetricsCollector instance renders only its own
  state and no process-wide registry is shared
- Percentiles are computed on demand at scrape time (nearest-rank) instead of
  being maintained incrementally; scrapes are rare relative to requests

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
import math
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import asdict, dataclass
from typing import Any

import psutil
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
    SummaryMetricFamily,
)
from prometheus_client.registry import Collector

from sre_monitor.core.config.constants import (
    ERROR_STATUS_THRESHOLD,
    METRICS_CONTENT_TYPE,
    OTHER_ENDPOINT_BUCKET,
    SUMMARY_QUANTILES,
    Stage,
)
from sre_monitor.core.exceptions import ConfigurationError
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EndpointStats:
    count: int = 0
    errors: int = 0
    total_duration_ms: float = 0.0

    @property
    def average_duration_ms(self) -> float:
        return self.total_duration_ms / self.count if self.count else 0.0


class MetricsCollector:
    """
    Request outcome recorder.

    STAGE-M: Metrics collection

    Usage:
        metrics = MetricsCollector()

        # Record a completed request
        metrics.record_request(12.5, 200, "/health")

        # Nearest-rank percentile over the recent latencies
        p99 = metrics.get_percentile(99)

        # Prometheus text output
        body = metrics.render_metrics()
    """

    def __init__(
        self,
        duration_capacity: int = 10000,
        max_endpoints: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        if duration_capacity < 1:
            raise ConfigurationError(
                "Duration capacity must be at least 1",
                details={"duration_capacity": duration_capacity},
            )
        if max_endpoints < 1:
            raise ConfigurationError(
                "Endpoint cap must be at least 1", details={"max_endpoints": max_endpoints}
            )

        self.duration_capacity = duration_capacity
        self.max_endpoints = max_endpoints
        self._clock = clock

        self.request_count = 0
        self.error_count = 0
        self.duration_total_ms = 0.0
        self.request_durations: deque[float] = deque(maxlen=duration_capacity)
        self.status_codes: dict[int, int] = {}
        self.endpoints: dict[str, EndpointStats] = {}
        self.start_time = clock()

        self._event_loop_lag_ms = 0.0
        self._process = psutil.Process()
        self._lock = threading.Lock()

        self._registry = CollectorRegistry(auto_describe=False)
        self._registry.register(_RequestMetricsCollector(self))

        logger.info(
            "Metrics collector initialized",
            duration_capacity=duration_capacity,
            max_endpoints=max_endpoints,
            stage=Stage.METRICS,
        )

    # =========================================================================
    # Recording
    # =========================================================================

    def _endpoint_key(self, endpoint: str) -> str:
        """Strip the query string and bucket endpoints beyond the cap. Caller holds the lock."""
        path = endpoint.split("?", 1)[0] or "/"
        if path in self.endpoints or len(self.endpoints) < self.max_endpoints:
            return path
        return OTHER_ENDPOINT_BUCKET

    def record_request(self, duration_ms: float, status_code: int, endpoint: str) -> None:
        """Record one completed request (admitted or rejected)."""
        with self._lock:
            self.request_count += 1
            self.duration_total_ms += duration_ms
            # deque(maxlen=...) evicts the oldest sample once full
            self.request_durations.append(duration_ms)
            self.status_codes[status_code] = self.status_codes.get(status_code, 0) + 1

            key = self._endpoint_key(endpoint)
            stats = self.endpoints.get(key)
            if stats is None:
                stats = self.endpoints[key] = EndpointStats()
            stats.count += 1
            stats.total_duration_ms += duration_ms

            if status_code >= ERROR_STATUS_THRESHOLD:
                self.error_count += 1
                stats.errors += 1

    # =========================================================================
    # Queries
    # =========================================================================

    def get_percentile(self, percentile: float) -> float:
        """
        Nearest-rank percentile of the recorded durations (ms).

        Returns 0 when nothing has been recorded; percentile 0 yields the minimum
        and percentile 100 the maximum.
        """
        with self._lock:
            samples = sorted(self.request_durations)
        return self._nearest_rank(samples, percentile)

    @staticmethod
    def _nearest_rank(samples: list[float], percentile: float) -> float:
        if not samples:
            return 0
        # p * n / 100 rather than p / 100 * n: 0.9 * 100 is 90.00000000000001
        rank = math.ceil(percentile * len(samples) / 100)
        index = min(max(rank - 1, 0), len(samples) - 1)
        return samples[index]

    def get_event_loop_lag(self) -> float:
        """
        Last measured event loop lag in milliseconds.

        Each call schedules a zero-delay callback on the running loop and
        returns the value cached by the previous measurement; the new value is
        only known once the loop gets around to running the callback.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self._event_loop_lag_ms

        scheduled_at = loop.time()
        loop.call_soon(self._store_event_loop_lag, loop, scheduled_at)
        return self._event_loop_lag_ms

    def _store_event_loop_lag(self, loop: asyncio.AbstractEventLoop, scheduled_at: float) -> None:
        self._event_loop_lag_ms = (loop.time() - scheduled_at) * 1000

    def uptime_seconds(self) -> float:
        return self._clock() - self.start_time

    def process_stats(self) -> dict[str, float]:
        memory = self._process.memory_info()
        cpu = self._process.cpu_times()
        return {
            "rss": memory.rss,
            "vms": memory.vms,
            "cpu_user": cpu.user,
            "cpu_system": cpu.system,
        }

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe copy of the raw counters."""
        with self._lock:
            return {
                "request_count": self.request_count,
                "error_count": self.error_count,
                "recorded_durations": len(self.request_durations),
                "status_codes": {str(code): count for code, count in self.status_codes.items()},
                "endpoints": {path: asdict(stats) for path, stats in self.endpoints.items()},
                "uptime_seconds": self.uptime_seconds(),
            }

    # =========================================================================
    # Export
    # =========================================================================

    def render_metrics(self) -> bytes:
        """
        Get Prometheus metrics output.

        Returns:
            bytes: Prometheus text format metrics
        """
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get Prometheus content type."""
        return METRICS_CONTENT_TYPE


class _RequestMetricsCollector(Collector):
    """Turns a MetricsCollector's state into metric families at scrape time."""

    def __init__(self, metrics: MetricsCollector):
        self._metrics = metrics

    def collect(self) -> Iterator[Metric]:
        m = self._metrics
        with m._lock:
            request_count = m.request_count
            error_count = m.error_count
            duration_total_ms = m.duration_total_ms
            samples = sorted(m.request_durations)
            status_codes = sorted(m.status_codes.items())
            endpoints = [(path, EndpointStats(**asdict(s))) for path, s in m.endpoints.items()]

        yield CounterMetricFamily(
            "http_requests", "Total number of HTTP requests", value=request_count
        )
        yield CounterMetricFamily(
            "http_errors", "Total number of HTTP errors", value=error_count
        )
        yield GaugeMetricFamily(
            "app_uptime_seconds", "Application uptime in seconds", value=m.uptime_seconds()
        )

        duration = SummaryMetricFamily(
            "http_request_duration_seconds", "HTTP request latencies"
        )
        for quantile in SUMMARY_QUANTILES:
            duration.add_sample(
                "http_request_duration_seconds",
                {"quantile": str(quantile)},
                m._nearest_rank(samples, quantile * 100) / 1000,
            )
        # _count and _sum cover every request, not just the ring
        duration.add_sample("http_request_duration_seconds_count", {}, request_count)
        duration.add_sample("http_request_duration_seconds_sum", {}, duration_total_ms / 1000)
        yield duration

        process = m.process_stats()
        memory = GaugeMetricFamily(
            "nodejs_memory_usage_bytes", "Process memory usage", labels=["type"]
        )
        memory.add_metric(["rss"], process["rss"])
        memory.add_metric(["vms"], process["vms"])
        yield memory

        # Rendered as a gauge: the series name carries no _total suffix
        cpu = GaugeMetricFamily(
            "nodejs_cpu_usage_seconds", "Process CPU usage", labels=["type"]
        )
        cpu.add_metric(["user"], process["cpu_user"])
        cpu.add_metric(["system"], process["cpu_system"])
        yield cpu

        yield GaugeMetricFamily(
            "nodejs_eventloop_lag_seconds", "Event loop lag", value=m.get_event_loop_lag() / 1000
        )

        by_status = GaugeMetricFamily(
            "http_requests_by_status", "HTTP requests by status code", labels=["status"]
        )
        for code, count in status_codes:
            by_status.add_metric([str(code)], count)
        yield by_status

        by_endpoint = GaugeMetricFamily(
            "http_requests_by_endpoint", "HTTP requests by endpoint", labels=["endpoint"]
        )
        errors_by_endpoint = GaugeMetricFamily(
            "http_errors_by_endpoint", "HTTP errors by endpoint", labels=["endpoint"]
        )
        duration_by_endpoint = GaugeMetricFamily(
            "http_request_duration_by_endpoint",
            "Average HTTP request duration by endpoint in seconds",
            labels=["endpoint"],
        )
        for path, stats in endpoints:
            by_endpoint.add_metric([path], stats.count)
            errors_by_endpoint.add_metric([path], stats.errors)
            duration_by_endpoint.add_metric([path], stats.average_duration_ms / 1000)
        yield by_endpoint
        yield errors_by_endpoint
        yield duration_by_endpoint
