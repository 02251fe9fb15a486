"""
auth/tokens.py -- JWT, password hashing, and credential verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       user_id, username, and a 24h expiry. Verification returns None on any
       failure -- the auth dependency turns that into a 403.

  Passwords: bcrypt with a fixed cost factor of 10 rounds. bcrypt's cost
       factor makes brute-force expensive, and checkpw() does the comparison
       in constant time. The _DUMMY_HASH constant enables timing equalization
       in authenticate_user() so response time does not reveal whether a
       username exists.

  Registration: register_user() refuses a username or email that is already
       taken with Conflict. The pre-check gives a clean error on the common
       path; the UNIQUE constraints catch the race between two concurrent
       registrations.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup: dev mode (DEBUG=true) uses the documented
       insecure fallback with a warning; production mode refuses to start
       without one.

Layer rule: no imports from api/ or portfolio/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError

from auth.models import Principal, User
from core.config import get_settings
from core.errors import Conflict

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("portfolio.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Callers must keep plain within MAX_PASSWORD_BYTES once UTF-8 encoded; the
    API request models and the create-user command both check it.
    """
    salt = bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash -- treat as a failed match.
        return False


# Timing equalization dummy hash. Computed once at module load so the first
# login attempt is not measurably slower than subsequent ones.
_DUMMY_HASH: str = hash_password("portfolio_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    username: str,
    expire_seconds: int = 0,
    issued_at: datetime | None = None,
) -> str:
    """Encode a signed JWT carrying the principal id, username, and expiry.

    Args:
        user_id:        Numeric user ID stored in the DB.
        username:       Username stored as the JWT subject claim.
        expire_seconds: Token lifetime. If 0 (default), uses
                        Settings.token_expire_seconds (24h).
        issued_at:      Issue instant; defaults to now. Tests pass a past
                        instant to mint an already-expired token.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "user_id": user_id,
        "iat": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> Principal | None:
    """Verify a JWT and return its Principal, or None on any failure.

    Covers malformed tokens, signature mismatch, and expiry (python-jose
    checks the exp claim against the current clock).
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("user_id")
    username = payload.get("sub")
    if not isinstance(user_id, int) or not isinstance(username, str):
        return None
    return Principal(id=user_id, username=username)


# ---------------------------------------------------------------------------
# Credential store operations
# ---------------------------------------------------------------------------


def register_user(store: UserStore, username: str, email: str, password: str) -> User:
    """Create a new principal. Raises Conflict if the username or email is taken.

    Only the bcrypt digest reaches the store.
    """
    if store.exists(username, email):
        raise Conflict("Username or email already exists.")
    user = User(username=username, email=email, hashed_password=hash_password(password))
    try:
        user.id = store.create_user(user)
    except IntegrityError as exc:
        raise Conflict("Username or email already exists.") from exc
    logger.info("Registered user %s (id=%s)", username, user.id)
    return user


def authenticate_user(store: UserStore, username: str, password: str) -> User | None:
    """Authenticate a username/password login with timing equalization.

    Always runs bcrypt whether or not the user exists, so the two failure
    cases cost the same and return the same None:
    - Unknown username: bcrypt runs against _DUMMY_HASH
    - Wrong password: bcrypt runs against the real hash

    Returns the User on success, None on any failure.
    """
    user = store.get_by_username(username)
    if user is None or not user.hashed_password:
        # Equalize timing -- do NOT return early before running bcrypt
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
