"""
Bearer token authentication for udagram services.

Endpoints opt in with ``Depends(require_auth)``. The dependency reads the
TokenIssuer stored on ``app.state.tokens`` by the app factory, so any app
that wants authenticated routes only has to set that attribute.

Usage:
    from fastapi import Depends

    @router.get("/protected")
    async def protected(identity: dict = Depends(require_auth)):
        return {"email": identity["email"]}
"""

import logging
from typing import Any

from fastapi import Request

from .errors import AuthError, AuthenticationFailed, TokenError
from .security import TokenIssuer

logger = logging.getLogger(__name__)


def parse_authorization(header: str | None) -> str:
    """
    Extract the token from an ``Authorization: <scheme> <token>`` header.

    Raises:
        AuthError: header missing, or not exactly two space-separated parts
    """
    if not header:
        raise AuthError("No authorization headers.")

    token_bearer = header.split(" ")  # e.g. "Bearer eyJhbGciOi..."
    if len(token_bearer) != 2:
        raise AuthError("Malformed token.")

    return token_bearer[1]


async def require_auth(request: Request) -> dict[str, Any]:
    """Dependency that rejects the request unless it carries a valid bearer token."""
    token = parse_authorization(request.headers.get("authorization"))

    tokens: TokenIssuer = request.app.state.tokens
    try:
        identity = tokens.verify(token)
    except TokenError as exc:
        logger.info("Rejected bearer token on %s: %s", request.url.path, exc)
        raise AuthenticationFailed("Failed to authenticate.", auth=False) from exc

    request.state.identity = identity
    return identity
