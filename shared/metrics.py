"""
Shared metrics configuration for the Movie Catalog services.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest


class MetricsCollector:
    """Centralized metrics collector for services.

    Every collector owns its registry, so several services (or test apps) can
    live in one process without colliding on metric names.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        if self.service_name == "movies":
            self._setup_movies_metrics()

    def _setup_movies_metrics(self):
        """Set up movie-service-specific metrics."""
        self._metrics["movie_service_requests_total"] = Counter(
            "movie_service_requests_total",
            "Total number of requests to the MovieService",
            ["method", "status"],
            registry=self.registry
        )

        self._metrics["movie_service_request_duration_seconds"] = Histogram(
            "movie_service_request_duration_seconds",
            "Histogram of request durations for the MovieService",
            ["method", "status"],
            registry=self.registry
        )

        self._metrics["movie_cache_requests_total"] = Counter(
            "movie_cache_requests_total",
            "Cache lookups by namespace and result",
            ["namespace", "result"],
            registry=self.registry
        )

    def render(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_operation(self, method: str, status: str, duration: float):
        """Record a service operation outcome and its duration."""
        self.increment_counter("movie_service_requests_total", method=method, status=status)
        self.observe_histogram("movie_service_request_duration_seconds", duration, method=method, status=status)

    def record_cache_lookup(self, namespace: str, result: str):
        """Record a cache lookup (hit, miss or error)."""
        self.increment_counter("movie_cache_requests_total", namespace=namespace, result=result)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).observe(value)

    def sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read back a sample from the registry."""
        return self.registry.get_sample_value(name, labels or {})


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
