"""One-call observability setup driven by the config."""

from __future__ import annotations

from prometheus_client import CollectorRegistry

from kv_engine.infrastructure.config import Config, get_config
from kv_engine.infrastructure.logging import get_logger, setup_logging
from kv_engine.infrastructure.metrics import MetricsRegistry, setup_metrics
from kv_engine.infrastructure.tracing import setup_tracing


def setup_observability(
    config: Config | None = None,
    registry: CollectorRegistry | None = None,
) -> MetricsRegistry:
    """
    Configure logging, tracing and the metrics server for a process.

    Call once at startup, before opening engines. Engines created afterwards
    report into the returned registry through get_metrics().

    Args:
        config: Configuration to apply (default: get_config())
        registry: Optional custom Prometheus registry

    Returns:
        The process-wide metrics registry
    """
    config = config or get_config()
    observability = config.observability

    setup_logging(level=observability.log_level, log_format=observability.log_format)
    setup_tracing(
        service_name=observability.otel_service_name,
        otlp_endpoint=observability.otel_endpoint,
    )
    metrics = setup_metrics(port=observability.metrics_port, registry=registry)

    get_logger(__name__).info(
        "observability_configured",
        log_level=observability.log_level,
        metrics_port=observability.metrics_port,
        otel_endpoint=observability.otel_endpoint,
        sync_mode=config.storage.sync_mode,
    )
    return metrics
