"""
auth/directory.py -- User directory workflows: register, login, update, delete.

These functions sit between the route handlers and UserStore. They take the
store and TokenService explicitly (same shape as a store-plus-credentials
helper) so they can be unit tested without FastAPI.

Error mapping:
  IntegrityError on insert/update  -> Conflict (email already registered)
  any other SQLAlchemyError        -> InternalError with a generic message
  missing user                     -> NotFound

Login behavior:
  By default login_user() does NOT verify the password. This is the historical
  contract of the service and is kept for compatibility; it is a known defect.
  Pass check_password=True (Settings.login_checks_password) for the corrected
  behavior, where a wrong password raises BadCredentials.

Layer rule: no imports from api/ or blog/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from auth.store import UserStore
from auth.tokens import DEFAULT_BCRYPT_ROUNDS, TokenService, hash_password, verify_password
from core.errors import BadCredentials, Conflict, InternalError, NotFound

logger = logging.getLogger("blogapi.auth")


def register_user(
    store: UserStore,
    tokens: TokenService,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> tuple[User, str]:
    """Create a user with a hashed password and return (user, session token)."""
    new_user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=hash_password(password, rounds),
    )
    try:
        user_id = store.create_user(new_user)
        created = store.get_by_id(user_id)
    except IntegrityError as exc:
        logger.info("Registration rejected: email already registered")
        raise Conflict("A user with that email already exists.") from exc
    except SQLAlchemyError as exc:
        logger.exception("Error registering user")
        raise InternalError("Error registering user") from exc
    if created is None:
        raise InternalError("Error registering user")

    logger.info("Registered user %s", created.id)
    return created, tokens.issue(created.id)


def login_user(
    store: UserStore,
    tokens: TokenService,
    email: str,
    password: str,
    check_password: bool = False,
) -> tuple[User, str]:
    """Look up a user by email and return (user, session token).

    Raises NotFound for an unknown email. The password is only checked when
    check_password is True.
    """
    try:
        user = store.get_by_email(email)
    except SQLAlchemyError as exc:
        logger.exception("Error logging in user")
        raise InternalError("Error logging in user") from exc
    if user is None:
        raise NotFound("User not found")
    if check_password and not verify_password(password, user.password_hash):
        raise BadCredentials()

    logger.info("User %s logged in", user.id)
    return user, tokens.issue(user.id)


def get_user(store: UserStore, user_id: str) -> User:
    try:
        user = store.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching user %s", user_id)
        raise InternalError("Error fetching user") from exc
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(store: UserStore) -> list[User]:
    try:
        return store.list_users()
    except SQLAlchemyError as exc:
        logger.exception("Error listing users")
        raise InternalError("Error fetching users") from exc


def update_user(
    store: UserStore,
    user_id: str,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
    password: str | None = None,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """Apply a partial update and return the stored user.

    Only supplied fields change. The password hash is replaced only when a new
    plaintext password is given.
    """
    fields: dict = {}
    if first_name is not None:
        fields["first_name"] = first_name
    if last_name is not None:
        fields["last_name"] = last_name
    if email is not None:
        fields["email"] = email
    if password:
        fields["password_hash"] = hash_password(password, rounds)

    try:
        updated = store.update_user(user_id, **fields)
        user = store.get_by_id(user_id) if updated else None
    except IntegrityError as exc:
        logger.info("Update of user %s rejected: email already registered", user_id)
        raise Conflict("A user with that email already exists.") from exc
    except SQLAlchemyError as exc:
        logger.exception("Error updating user %s", user_id)
        raise InternalError("Error updating user") from exc
    if user is None:
        raise NotFound("User not found")

    logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(fields)) or "no changes")
    return user


def delete_user(store: UserStore, user_id: str) -> None:
    """Remove the user record only. Blog cleanup is the caller's job."""
    try:
        deleted = store.delete_user(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Error deleting user %s", user_id)
        raise InternalError("Error deleting user") from exc
    if not deleted:
        raise NotFound("User not found")
    logger.info("Deleted user %s", user_id)
