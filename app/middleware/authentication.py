"""Bearer-token authentication filter.

Resolves `Authorization: Bearer <token>` into a CurrentUser stored on
request.state.identity. Requests are never rejected here: routes that need an
identity declare it through the dependencies in app.api.v1.auth.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.security import TokenCodec, TokenError
from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from a 'Bearer <token>' header value, or None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def resolve_identity(authorization: str | None, codec: TokenCodec) -> CurrentUser | None:
    """Identity for a header value, or None when the header is missing or the token is invalid."""
    token = extract_bearer_token(authorization)
    if token is None or not codec.validate(token):
        return None
    try:
        claims = codec.decode(token)
    except TokenError:
        # Expired between the two checks.
        return None
    return CurrentUser(username=claims.subject, role=claims.role)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Populate request.state.identity once per request from the bearer token."""

    def __init__(self, app: ASGIApp, codec: TokenCodec) -> None:
        super().__init__(app)
        self.codec = codec

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if getattr(request.state, "identity", None) is None:
            identity = resolve_identity(request.headers.get(AUTHORIZATION_HEADER), self.codec)
            if identity is None and AUTHORIZATION_HEADER.lower() in request.headers:
                logger.debug("No identity resolved for %s %s", request.method, request.url.path)
            request.state.identity = identity
        return await call_next(request)
