"""
auth/dependencies.py -- FastAPI Depends() helper for authentication.

The token travels in the Authorization header as "Bearer <token>". There is
no cookie or API-key path: clients hold the token and attach it themselves.

get_current_user() is the only gate. It either returns the User that owns the
token or raises Unauthenticated, which api/main.py renders as a 401
{"success": false, "message": ...} response. No retries, no partial success.

Layer rule: no imports from api/ or products/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import ExpiredToken, InvalidToken, Unauthenticated


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user(request: Request) -> User:
    """Require authentication. Raises Unauthenticated if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...

    Order of checks:
      1. Header present with a Bearer token.
      2. Token signature and expiry (TokenIssuer.verify).
      3. The user the token names still exists.
    """
    token = _bearer_token(request)
    if token is None:
        raise Unauthenticated("Not authorized, no token")

    tokens: TokenIssuer = request.app.state.tokens
    try:
        user_id = tokens.verify(token)
    except ExpiredToken as exc:
        raise Unauthenticated("Not authorized, token expired") from exc
    except InvalidToken as exc:
        raise Unauthenticated("Not authorized, token failed") from exc

    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(user_id)
    if user is None:
        raise Unauthenticated("Not authorized, user not found")
    return user
