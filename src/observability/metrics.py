"""
Prometheus metrics for monitoring repo-chronicle.

Defines and exposes metrics for:
- Remote history API requests
- Activities fetched per type
- Article generation outcomes and latency
- Local article store operations

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for generation latency (LLM calls take seconds, not milliseconds)
GENERATION_BUCKETS = (0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 40.0, 80.0)


class MetricsCollector:
    """
    Prometheus metrics collector for repo-chronicle.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_remote_request("commits", 200)
        metrics.record_generation("commit", "success", latency=3.2)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.remote_requests = Counter(
            "chronicle_remote_requests_total",
            "Total requests made to the remote history API",
            ["endpoint", "status"],
        )

        self.activities_fetched = Counter(
            "chronicle_activities_fetched_total",
            "Total timeline activities fetched",
            ["activity_type"],
        )

        self.generations = Counter(
            "chronicle_generations_total",
            "Total article generation attempts",
            ["activity_type", "outcome"],  # outcome: success, validation, configuration, throttled, failed
        )

        self.generation_latency = Histogram(
            "chronicle_generation_latency_seconds",
            "Time spent waiting for the text generation service",
            ["provider"],
            buckets=GENERATION_BUCKETS,
        )

        self.store_operations = Counter(
            "chronicle_store_operations_total",
            "Article store operations",
            ["operation", "outcome"],  # outcome: ok, missing, error
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_remote_request(self, endpoint: str, status: int) -> None:
        """
        Record one remote history API request.

        Args:
            endpoint: Logical endpoint (commits, pulls)
            status: HTTP status returned (502 for transport failures)
        """
        self.remote_requests.labels(endpoint=endpoint, status=str(status)).inc()

    def record_activities(self, activity_type: str, count: int) -> None:
        """Record activities returned by a fetch."""
        if count > 0:
            self.activities_fetched.labels(activity_type=activity_type).inc(count)

    def record_generation(
        self,
        activity_type: str,
        outcome: str,
        latency: float | None = None,
        provider: str | None = None,
    ) -> None:
        """
        Record one article generation attempt.

        Args:
            activity_type: commit or pull_request
            outcome: success, validation, configuration, throttled, failed
            latency: Optional remote call latency in seconds
            provider: Provider that served the call
        """
        self.generations.labels(activity_type=activity_type, outcome=outcome).inc()
        if latency is not None and provider:
            self.generation_latency.labels(provider=provider).observe(latency)

    def record_store_operation(self, operation: str, outcome: str) -> None:
        """Record one article store operation (save, update, delete, clear, read)."""
        self.store_operations.labels(operation=operation, outcome=outcome).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
