"""
api/routes/users.py -- Registration, login and user management endpoints.

Routes:
  GET    /api/users               -- list every user (public)
  POST   /api/register            -- create account; returns user + token
  POST   /api/login               -- exchange email for a token
  PUT    /api/user                -- partial update of the caller (requires auth)
  GET    /api/users/{user_id}     -- fetch one user (requires auth)
  DELETE /api/users/{user_id}     -- delete a user and their posts (requires auth)

Known gaps kept for compatibility (see DESIGN.md):
  - GET /api/users is public and returns password hashes.
  - POST /api/login ignores the password unless LOGIN_CHECKS_PASSWORD is set.
  - DELETE /api/users/{user_id} does not check ownership unless
    ENFORCE_OWNERSHIP is set.

Handlers that hash passwords, sign tokens or hit the database are sync `def`
so FastAPI runs them on its threadpool and the event loop stays free.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from api.models import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserMessageResponse,
    UserRecord,
    UserUpdate,
)
from auth import directory
from auth.dependencies import get_current_user
from auth.models import User
from auth.policy import require_owner
from auth.store import UserStore
from blog.store import BlogStore
from core.config import Settings
from core.errors import EmptyResult, InternalError

logger = logging.getLogger("blogapi.api.users")

# Auth policy:
# - GET    /api/users:            public
# - POST   /api/register:         public
# - POST   /api/login:            public
# - PUT    /api/user:             requires auth (get_current_user); target is the caller
# - GET    /api/users/{user_id}:  requires auth (get_current_user)
# - DELETE /api/users/{user_id}:  requires auth + require_owner (enforced only with ENFORCE_OWNERSHIP)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[UserRecord])
def list_users(request: Request) -> list[UserRecord]:
    """Return every user record, including password hashes."""
    user_store: UserStore = request.app.state.user_store
    return [UserRecord.from_user(u) for u in directory.list_users(user_store)]


@router.post("/register", response_model=AuthResponse)
def register(request: Request, body: RegisterRequest) -> AuthResponse:
    """Create an account and return it with a fresh session token."""
    settings: Settings = request.app.state.settings
    user, token = directory.register_user(
        request.app.state.user_store,
        request.app.state.tokens,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        rounds=settings.bcrypt_rounds,
    )
    return AuthResponse(
        user=UserRecord.from_user(user),
        token=token,
        message="User registered successfully!",
    )


@router.post("/login", response_model=AuthResponse)
def login(request: Request, body: LoginRequest) -> AuthResponse:
    """Issue a session token for the account registered under body.email."""
    settings: Settings = request.app.state.settings
    user, token = directory.login_user(
        request.app.state.user_store,
        request.app.state.tokens,
        email=body.email,
        password=body.password,
        check_password=settings.login_checks_password,
    )
    return AuthResponse(
        user=UserRecord.from_user(user),
        token=token,
        message="User logged in successfully!",
    )


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.put("/user", response_model=UserMessageResponse)
def update_current_user(
    request: Request,
    body: UserUpdate,
    current_user: User = Depends(get_current_user),
) -> UserMessageResponse:
    """Update name, email or password of the authenticated user."""
    settings: Settings = request.app.state.settings
    updated = directory.update_user(
        request.app.state.user_store,
        current_user.id,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        rounds=settings.bcrypt_rounds,
    )
    return UserMessageResponse(message="User updated successfully!", user=UserRecord.from_user(updated))


@router.get("/users/{user_id}", response_model=UserRecord)
def get_user(
    request: Request,
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> UserRecord:
    return UserRecord.from_user(directory.get_user(request.app.state.user_store, user_id))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    request: Request,
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Delete a user, then delete every post they authored.

    The two deletes are independent writes. If the post cleanup fails after the
    user row is gone, the posts are left orphaned; that window is logged so it
    can be repaired with DELETE /api/blogs/user/{user_id}.
    """
    settings: Settings = request.app.state.settings
    blog_store: BlogStore = request.app.state.blog_store

    require_owner(current_user, user_id, settings.enforce_ownership)
    directory.delete_user(request.app.state.user_store, user_id)

    try:
        removed = blog_store.delete_by_author(user_id)
    except EmptyResult:
        removed = 0
    except SQLAlchemyError as exc:
        logger.exception("User %s deleted but blog cleanup failed; posts are orphaned", user_id)
        raise InternalError("Error deleting user") from exc

    logger.info("Deleted user %s and %d blog post(s)", user_id, removed)
    return MessageResponse(message="User and associated blogs deleted successfully!")
