"""API middleware."""

from shopdesk.api.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from shopdesk.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
