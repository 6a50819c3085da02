"""
auth/service.py -- Registration and login flows.

Both operations are stateless and single-shot: one lookup, at most one
write, no retries. They raise the errors below; api/routes/v1/auth.py maps
them onto HTTP responses.

Layer rule: no imports from api/ or listings/. Settings arrive from the caller.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, hash_password
from core.config import Settings

logger = logging.getLogger("harveshare.auth")


class AuthError(Exception):
    """Base class for client-side authentication failures."""

    code = "auth_error"
    message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class DuplicateUserError(AuthError):
    code = "duplicate_user"
    message = "User already exists"


class InvalidCredentialsError(AuthError):
    # Deliberately the same for "no such account" and "wrong password".
    code = "invalid_credentials"
    message = "Invalid email or password"


def register_user(store: UserStore, name: str, email: str, password: str) -> User:
    """Create an account for email. Raises DuplicateUserError if it exists.

    The lookup-before-insert keeps the common case cheap (no bcrypt work for
    a known duplicate). A concurrent registration that slips past the lookup
    is caught by the unique index on users.email.
    """
    if store.get_by_email(email) is not None:
        raise DuplicateUserError()

    user = User(name=name, email=email, hashed_password=hash_password(password))
    try:
        user.id = store.create_user(user)
    except IntegrityError as exc:
        raise DuplicateUserError() from exc

    logger.info("Registered user %s", user.id)
    return user


def login_user(store: UserStore, settings: Settings, email: str, password: str) -> str:
    """Verify credentials and return an access token signed with settings.secret_key.

    Raises InvalidCredentialsError for an unknown email and for a wrong
    password alike.
    """
    user = authenticate_user(store, email, password)
    if user is None:
        raise InvalidCredentialsError()
    logger.info("Login: user %s", user.id)
    return create_access_token(user.email, settings.secret_key, settings.token_expire_seconds)
