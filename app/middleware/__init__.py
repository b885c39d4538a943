"""ASGI middleware: bearer-token authentication and security headers."""

from app.middleware.authentication import AuthenticationMiddleware, resolve_identity
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["AuthenticationMiddleware", "SecurityHeadersMiddleware", "resolve_identity"]
