"""Request middleware: correlation IDs, metrics and error responses."""

from .correlation import CorrelationIdMiddleware, get_correlation_id
from .error_handler import ErrorHandlerMiddleware, register_error_handlers
from .metrics import MetricsMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "ErrorHandlerMiddleware",
    "MetricsMiddleware",
    "get_correlation_id",
    "register_error_handlers",
]
