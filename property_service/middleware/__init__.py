"""
Middleware package for the property service.
Provides request context tracking and security headers.
"""

from .request_context import RequestContextMiddleware
from .security import SecurityHeadersMiddleware

__all__ = [
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware"
]
