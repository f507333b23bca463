"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

One auth method is accepted: the Authorization: Bearer <token> header.

try_get_session() is the soft variant (returns None on failure).
require_session() wraps it and raises Unauthenticated, which api/main.py turns
into a bare 401 before the handler body runs.

There is no role check here. Any valid token grants access to every route
guarded by require_session(); the role claim is carried for audit only. A route
that needs a specific role must check claims.role itself.

Layer rule: no imports from api/ or fleet/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import SessionClaims
from auth.tokens import decode_access_token
from core.errors import Unauthenticated

_BEARER_PREFIX = "Bearer "


def get_bearer_token(request: Request) -> str | None:
    """Return the raw token from the Authorization header, or None."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(_BEARER_PREFIX):
        return None
    return auth_header[len(_BEARER_PREFIX) :].strip() or None


def try_get_session(request: Request) -> SessionClaims | None:
    """Verify the request's bearer token. Never raises."""
    token = get_bearer_token(request)
    if token is None:
        return None
    return decode_access_token(token)


def require_session(request: Request) -> SessionClaims:
    """Require a valid bearer token. Raises Unauthenticated otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(claims: SessionClaims = Depends(require_session)): ...

    The claims are also stored on request.state.session for middleware and
    logging that run after the dependency.
    """
    claims = try_get_session(request)
    if claims is None:
        raise Unauthenticated()
    request.state.session = claims
    return claims
