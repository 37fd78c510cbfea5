"""Middleware package for the starter backend."""

from .error_handling_middleware import ErrorHandlingMiddleware
from .rate_limit_middleware import FixedWindowRateLimiter, RateLimitMiddleware
from .request_logging_middleware import RequestLoggingMiddleware
from .security_headers_middleware import SecurityHeadersMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "FixedWindowRateLimiter",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
