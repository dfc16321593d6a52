"""
Shared metrics configuration for the document submission client.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, start_http_server, CollectorRegistry
from typing import Dict, Any, Optional
import threading


class MetricsCollector:
    """Centralized metrics collector for the submission client.

    Metrics are only exported when a registry is given; with
    ``registry=None`` they are kept in memory and never registered.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up submission and quota metrics."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # Submission metrics
        self._metrics["submissions_total"] = Counter(
            "submissions_total",
            "Total document submissions",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["submission_duration_seconds"] = Histogram(
            "submission_duration_seconds",
            "Time spent sending a document, quota wait excluded",
            registry=self.registry
        )

        # Quota metrics
        self._metrics["quota_permits_available"] = Gauge(
            "quota_permits_available",
            "Permits currently available in the quota window",
            registry=self.registry
        )

        self._metrics["quota_waiters"] = Gauge(
            "quota_waiters",
            "Callers queued for a permit",
            registry=self.registry
        )

        self._metrics["quota_acquire_wait_seconds"] = Histogram(
            "quota_acquire_wait_seconds",
            "Time spent waiting for a permit",
            registry=self.registry
        )

        self._metrics["quota_replenish_total"] = Counter(
            "quota_replenish_total",
            "Permits restored by window replenishment",
            registry=self.registry
        )

    def start_metrics_server(self, port: int = 9090):
        """Start the Prometheus metrics server."""
        start_http_server(port, registry=self.registry)

    def record_submission(self, outcome: str, duration: Optional[float] = None):
        """Record one submission and, when known, how long the send took."""
        self._metrics["submissions_total"].labels(outcome=outcome).inc()
        if duration is not None:
            self._metrics["submission_duration_seconds"].observe(duration)

    def record_quota_state(self, available: int, waiters: int):
        """Publish the limiter counters."""
        with self._lock:
            self._metrics["quota_permits_available"].set(available)
            self._metrics["quota_waiters"].set(waiters)

    def record_acquire_wait(self, duration: float):
        """Record how long a caller waited for a permit."""
        self._metrics["quota_acquire_wait_seconds"].observe(duration)

    def record_replenish(self, released: int):
        """Record permits restored by one replenishment."""
        self._metrics["quota_replenish_total"].inc(released)


_collectors: Dict[str, MetricsCollector] = {}
_collectors_lock = threading.Lock()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get the metrics collector for a service, creating it on first use."""
    with _collectors_lock:
        collector = _collectors.get(service_name)
        if collector is None or (registry is not None and collector.registry is not registry):
            collector = MetricsCollector(service_name, registry)
            _collectors[service_name] = collector
        return collector
