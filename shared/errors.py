"""
Shared error handling for step filter evaluation.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class StepFilterException(Exception):
    """Base exception for step filter evaluation."""

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


class ExternalServiceError(StepFilterException):
    """External service errors."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class WebhookError(ExternalServiceError):
    """Webhook call failed in a way that retrying will not fix."""

    def __init__(self, message: str = "Webhook request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("webhook", message, details)
        self.code = "WEBHOOK_ERROR"


class WebhookRetryableError(WebhookError):
    """Transient webhook failure (transport error or retryable status)."""
