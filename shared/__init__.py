"""
Shared utilities for the Movie Catalog services.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracer provider construction
- observability: Span/log/metric instrumentation of operations
- errors: Canonical error types and responses
- deadline: Deadline enforcement for awaitables

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
