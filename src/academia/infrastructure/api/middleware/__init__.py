"""HTTP middleware."""

from academia.infrastructure.api.middleware.request_logging_middleware import (
    RequestLoggingMiddleware,
)
from academia.infrastructure.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)

__all__ = ["RequestLoggingMiddleware", "SecurityHeadersMiddleware"]
