"""Infrastructure layer - cross-cutting concerns."""

from kv_engine.infrastructure.config import Config, get_config
from kv_engine.infrastructure.logging import setup_logging, get_logger
from kv_engine.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from kv_engine.infrastructure.tracing import setup_tracing, get_tracer, trace_span
from kv_engine.infrastructure.observability import setup_observability

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "setup_observability",
]
