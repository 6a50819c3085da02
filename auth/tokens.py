"""
auth/tokens.py -- Password hashing and JWT utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the account email (as both the
       "sub" and "email" claims), the issue time and an expiry. Verification
       returns None on any failure -- the caller decides what that means.

  Passwords: bcrypt with a fixed cost factor of 10. Lowering it weakens
       stored hashes; raising it changes login latency for every client.
       The _DUMMY_HASH constant enables timing equalization in
       authenticate_user() so response time does not reveal whether an
       email is registered [C1].

  SECRET_KEY and expiry: passed in by the caller (taken from the Settings
       held by the application context). This module reads no configuration.

Layer rule: no imports from api/, core/ or listings/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("harveshare.auth")

_ALGORITHM = "HS256"

BCRYPT_ROUNDS = 10

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of its input; longer passwords
    are rejected by bcrypt 4.x, so they are cut to 72 bytes here the same
    way older bcrypt releases did silently.
    """
    return bcrypt.hashpw(plain.encode("utf-8")[:72], bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# Timing equalization dummy hash [C1].
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("harveshare_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    email: str, secret_key: str, expire_seconds: int, issued_at: datetime | None = None
) -> str:
    """Encode a signed JWT for the given account email.

    Args:
        email:          Account email, stored as the subject claim.
        secret_key:     HS256 signing key (Settings.secret_key).
        expire_seconds: Token lifetime in seconds (Settings.token_expire_seconds).
        issued_at:      Issue time; defaults to now (UTC). The expiry is
                        counted from this instant.
    """
    issued = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": email,
        "email": email,
        "iat": issued,
        "exp": issued + timedelta(seconds=expire_seconds),
    }
    return jwt.encode(payload, secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Expired tokens, bad signatures and malformed strings all yield None.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if "email" not in payload:
        return None
    return payload


# ---------------------------------------------------------------------------
# User authentication (constant-time) [C1]
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the account exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash

    Returns the User on success, None on any failure. Callers must not tell
    the two failure cases apart.
    """
    user = store.get_by_email(email)
    if user is None:
        # Equalize timing -- do NOT return before running bcrypt [C1]
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
