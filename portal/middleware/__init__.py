"""HTTP middleware: request context, body size limit, security headers.

Applied in portal.main; first added = outermost.
"""

from portal.middleware.request_context import RequestContextMiddleware
from portal.middleware.request_size_limit import RequestSizeLimitMiddleware
from portal.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestContextMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
