"""
Shared error handling for the Movie Catalog services.
"""

from typing import Dict, Any, Optional

from opentelemetry import trace
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class CatalogException(Exception):
    """Base exception for Movie Catalog services."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class NotFoundError(CatalogException):
    """Requested entity or page does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class NotPersistedError(CatalogException):
    """A write unexpectedly affected zero rows."""

    status_code = 500

    def __init__(self, message: str = "Write was not persisted", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_PERSISTED", message, details)


class CacheUnavailableError(CatalogException):
    """Cache backend unreachable or payload undecodable."""

    status_code = 503

    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)


class DeadlineExceededError(CatalogException):
    """The caller's deadline expired before the operation completed."""

    status_code = 504

    def __init__(self, message: str = "Deadline exceeded", details: Optional[Dict[str, Any]] = None):
        super().__init__("DEADLINE_EXCEEDED", message, details)


class ServiceError(CatalogException):
    """Service-related errors."""

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERVICE_ERROR", message, details)
