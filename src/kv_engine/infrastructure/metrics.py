"""Prometheus metrics for the key-value engine."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all key-value engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Write path
        self.sets_total = Counter(
            "kv_sets_total",
            "Total number of successful set operations",
            registry=self._registry,
        )

        self.bytes_appended_total = Counter(
            "kv_bytes_appended_total",
            "Total bytes appended to the log",
            registry=self._registry,
        )

        self.append_latency_seconds = Histogram(
            "kv_append_latency_seconds",
            "Log append latency in seconds, including sync",
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1),
            registry=self._registry,
        )

        # Read path
        self.gets_total = Counter(
            "kv_gets_total",
            "Total number of get operations",
            ["result"],  # hit, miss
            registry=self._registry,
        )

        # Index
        self.index_keys = Gauge(
            "kv_index_keys",
            "Number of distinct keys in the in-memory index",
            registry=self._registry,
        )

        # Recovery
        self.recovery_duration_seconds = Gauge(
            "kv_recovery_duration_seconds",
            "Duration of last recovery in seconds",
            registry=self._registry,
        )

        self.recovery_records_replayed = Counter(
            "kv_recovery_records_replayed_total",
            "Total log records replayed during recovery",
            registry=self._registry,
        )

        self.torn_tail_bytes = Counter(
            "kv_torn_tail_bytes_total",
            "Total bytes of incomplete trailing writes found during recovery",
            registry=self._registry,
        )

        self.info = Info(
            "kv_engine",
            "Key-value engine information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The Prometheus registry the metrics are registered in."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from kv_engine import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
