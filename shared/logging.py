"""
Shared logging configuration for step filter evaluation.
"""

import sys
import structlog
import logging
import time
from typing import Any, Dict, Optional
from contextvars import ContextVar, Token

from opentelemetry import trace

from shared.config import get_config

# Workflow step currently being evaluated
step_id_var: ContextVar[Optional[str]] = ContextVar('step_id', default=None)


def configure_logging(service_name: str, log_level: Optional[str] = None) -> None:
    """Configure structured logging for a service.

    The level defaults to ``FILTERS_LOG_LEVEL`` from the environment.
    """
    if log_level is None:
        log_level = get_config().log_level

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_trace_context,
            add_correlation_context,
            add_timestamp,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    logging.getLogger(service_name).setLevel(getattr(logging, log_level.upper()))


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Logger names are "<service>.<component>"
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the step under evaluation to log events."""
    step_id = step_id_var.get()
    if step_id:
        event_dict.setdefault("step_id", step_id)

    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add high-precision timestamp to log events."""
    event_dict["timestamp"] = time.time()
    return event_dict


def set_step_context(step_id: Optional[str]) -> Token:
    """Set the workflow step being evaluated in logging context."""
    return step_id_var.set(step_id)


def reset_step_context(token: Token) -> None:
    """Restore the step context that was active before ``set_step_context``."""
    step_id_var.reset(token)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
