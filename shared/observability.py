"""
Observability for service operations.
Integrates logging, metrics, and tracing around a single unit of work.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .logging import get_logger
from .metrics import MetricsCollector


class OperationObserver:
    """Wraps operations with a span, a structured log line, and metrics.

    The tracer, logger and metrics collector are injected so their lifecycle
    belongs to whoever builds the service.
    """

    def __init__(self, tracer: trace.Tracer, metrics: MetricsCollector, logger: Optional[Any] = None):
        self.tracer = tracer
        self.metrics = metrics
        self.logger = logger or get_logger("movies.observability")

    @asynccontextmanager
    async def observe(self, operation: str, **attributes: Any) -> AsyncIterator[trace.Span]:
        """Observe one operation, on success and on failure alike.

        Attribute values of ``None`` are skipped. Any exception, including
        cancellation, marks the outcome as ``error`` and is re-raised.
        """
        start_time = time.perf_counter()

        with self.tracer.start_as_current_span(
            operation,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
            span.add_event(f"Start: {operation}")
            self.logger.debug(f"Start: {operation}")

            try:
                yield span
            except BaseException as exc:
                duration = time.perf_counter() - start_time
                message = str(exc) or type(exc).__name__

                span.set_attribute("execution_duration_ms", duration * 1000)
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR, message))
                self.logger.error(
                    f"Error in {operation}",
                    error=message,
                    error_type=type(exc).__name__,
                    duration_ms=round(duration * 1000, 2),
                    **attributes
                )
                self.metrics.record_operation(operation, "error", duration)
                raise

            duration = time.perf_counter() - start_time
            span.set_attribute("execution_duration_ms", duration * 1000)
            span.set_status(Status(StatusCode.OK))
            self.logger.info(
                f"Success: {operation}",
                duration_ms=round(duration * 1000, 2),
                **attributes
            )
            self.metrics.record_operation(operation, "success", duration)
