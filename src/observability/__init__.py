"""Observability layer - structured logging and Prometheus metrics."""

from src.observability.logging import bind_repository, redact_secrets, setup_logging
from src.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "bind_repository", "redact_secrets", "MetricsCollector", "get_metrics"]
