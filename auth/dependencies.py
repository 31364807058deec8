"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The session token is read from the Authorization header exactly as sent. There
is no "Bearer " prefix handling: clients send the raw token string, and a
prefixed value fails verification like any other malformed token.

resolve_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises Unauthorized if unauthenticated.

Every failure in the chain (no header, bad signature, expired token, user since
deleted, store error) collapses to the same Unauthorized outcome. The status
code for that outcome comes from Settings.unauthorized_status_code and is
applied by the handler in api/main.py.

Layer rule: no imports from api/ or blog/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService
from core.errors import Unauthorized

logger = logging.getLogger("blogapi.auth")


def resolve_user(raw_token: str | None, user_store: UserStore, tokens: TokenService) -> User | None:
    """Return the User a raw token identifies, or None on any failure. Never raises."""
    try:
        user_id = tokens.verify(raw_token)
        if user_id is None:
            return None
        return user_store.get_by_id(user_id)
    except Exception:
        logger.warning("Identity resolution failed", exc_info=True)
        return None


def get_current_user(request: Request) -> User:
    """Require authentication. Raises Unauthorized if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user = resolve_user(
        request.headers.get("Authorization"),
        request.app.state.user_store,
        request.app.state.tokens,
    )
    if user is None:
        raise Unauthorized()
    request.state.user = user
    return user
