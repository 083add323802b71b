"""
auth/tokens.py -- Password hashing, session JWTs, and the session cookie.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with JWT_SECRET and carry
       user_id, email, name, iat and exp. exp is always iat + 7 days.
       Verification returns None on any failure -- malformed token, bad
       signature, expired, or missing claims. Callers treat None as "no
       session"; nothing in this module raises on a bad token.

  Passwords: bcrypt directly (no passlib wrapper). The work factor comes
       from BCRYPT_ROUNDS. The _DUMMY_HASH constant enables timing
       equalization in authenticate_user() so response time does not reveal
       whether an email is registered.

  Cookie: one helper writes the session cookie and one clears it. Both use
       _cookie_attributes() so the clearing Set-Cookie carries the same
       path/secure/httponly/samesite as the original -- a deletion with
       mismatched attributes is ignored by some browsers.

  JWT_SECRET: sourced from core.config.get_settings(). When unset, Settings
       substitutes the insecure demo constant and logs a warning.

Layer rule: no imports from api/, web/, or vendors/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import SessionClaims
from core.config import SESSION_TTL_SECONDS, get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("vendorify.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

SESSION_COOKIE = "vendorify_token"

# Enforced at signup by both the API and the web form.
MIN_PASSWORD_LENGTH = 6

# ---------------------------------------------------------------------------
# Password hashing (bcrypt)
# ---------------------------------------------------------------------------


# bcrypt ignores input past 72 bytes, and bcrypt>=5 raises instead of
# ignoring it. Both hashing and checking truncate here so they always agree.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Only the first 72 UTF-8 bytes take part in the hash.
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed hash is treated as a mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


# Computed once at module load so the first login is not measurably slower
# than later ones.
_DUMMY_HASH: str = hash_password("vendorify_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: int, email: str, name: str, now: datetime | None = None) -> str:
    """Encode a signed JWT for the given identity.

    Args:
        user_id: Primary key of the user record.
        email:   User email (also the login identifier).
        name:    Display name.
        now:     Issue time. Defaults to the current UTC time; tests pass an
                 explicit value to mint already-expired tokens.
    """
    issued = int((now or datetime.now(timezone.utc)).timestamp())
    payload = {
        "sub": str(user_id),
        "user_id": user_id,
        "email": email,
        "name": name,
        "iat": issued,
        "exp": issued + SESSION_TTL_SECONDS,
    }
    return jwt.encode(payload, _settings.jwt_secret, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> SessionClaims | None:
    """Verify a JWT and return its claims, or None on any failure."""
    try:
        payload = jwt.decode(token, _settings.jwt_secret, algorithms=[_ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("user_id")
    email = payload.get("email")
    name = payload.get("name")
    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if not isinstance(user_id, int) or not isinstance(email, str) or not isinstance(name, str):
        return None
    if not isinstance(issued_at, int) or not isinstance(expires_at, int):
        return None
    return SessionClaims(
        user_id=user_id,
        email=email,
        name=name,
        issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
    )


def issue_session_token(user: User) -> str:
    """Shortcut for create_access_token() from a stored User."""
    return create_access_token(user.id, user.email, user.name)


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Authenticate an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email is registered:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def _cookie_attributes() -> dict:
    return {
        "path": "/",
        "httponly": True,
        "samesite": "lax",
        "secure": _settings.secure_cookies,
    }


def set_session_cookie(response, token: str) -> None:
    """Write the session JWT as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie (XSS mitigation).
    samesite="lax": not sent on cross-site POST (CSRF mitigation).
    secure: HTTPS-only when SECURE_COOKIES=true or APP_ENV=production.
    max_age: matches the JWT expiry so both expire together.
    """
    response.set_cookie(SESSION_COOKIE, value=token, max_age=SESSION_TTL_SECONDS, **_cookie_attributes())


def clear_session_cookie(response) -> None:
    """Expire the session cookie immediately, matching the attributes it was set with."""
    response.set_cookie(SESSION_COOKIE, value="", max_age=0, **_cookie_attributes())
