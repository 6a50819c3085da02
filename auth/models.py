"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in listings/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, core/ or listings/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is the login identifier. It is unique and compared case-sensitively,
    exactly as it was submitted at registration.

    hashed_password is a bcrypt hash; the plaintext never leaves the request
    that carried it. Records are immutable after creation.
    """

    name: str
    email: str
    hashed_password: str
    id: str | None = None  # 24 hex chars, assigned by the store on insert
    created_at: str | None = None
