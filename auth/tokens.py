"""
auth/tokens.py -- Password hashing and session token utilities.

Security design decisions:
  Passwords: bcrypt used directly (no passlib wrapper), cost factor 10 by
       default (Settings.bcrypt_rounds). Hashing is CPU-bound on purpose; route
       handlers that call it are sync `def` functions so FastAPI runs them on
       its threadpool instead of the event loop.

  Session tokens: python-jose with HS256. Tokens carry the user id in an "id"
       claim plus iat/exp, and live for Settings.token_expire_seconds (1 hour).
       TokenService.verify() returns None on any failure -- missing, malformed,
       badly signed or expired tokens are indistinguishable to the caller.

  No revocation: tokens are stateless. A token stays valid until exp even if
       the user changes their password. A deleted user is still rejected, but
       only because the identity lookup in auth/dependencies.py fails.

  Signing key: passed into TokenService by the application lifespan. This
       module never reads configuration itself.

Layer rule: no imports from api/ or blog/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from core.errors import InternalError

logger = logging.getLogger("blogapi.auth")

_ALGORITHM = "HS256"

DEFAULT_BCRYPT_ROUNDS = 10
DEFAULT_TOKEN_EXPIRE_SECONDS = 60 * 60

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt refuses some inputs (e.g. more than 72 bytes on recent releases).
    Any such failure surfaces as InternalError; the plaintext is never logged.
    """
    try:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except ValueError as exc:
        logger.error("Password hashing failed: %s", type(exc).__name__)
        raise InternalError("Password could not be processed.") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


class TokenService:
    """Issue and verify signed, time-limited session tokens.

    Usage:
        tokens = TokenService(settings.secret_key)
        token = tokens.issue(user.id)
        user_id = tokens.verify(token)   # None if invalid or expired
    """

    def __init__(self, secret_key: str, expire_seconds: int = DEFAULT_TOKEN_EXPIRE_SECONDS) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a signing key.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, user_id: str, issued_at: datetime | None = None) -> str:
        """Encode a token for user_id that expires expire_seconds after issued_at.

        issued_at defaults to now. Passing an explicit value is how tests mint
        tokens that are already expired.
        """
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "iat": iat,
            "exp": iat + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str | None) -> str | None:
        """Return the user id carried by token, or None on any failure."""
        if not token or not isinstance(token, str):
            return None
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            return None
        return user_id
