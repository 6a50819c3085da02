"""
core/ids.py -- Identifier generation shared by the user and listing stores.

Ids follow the ObjectId layout: 4-byte seconds timestamp, 5 random bytes
fixed per process, 3-byte counter, rendered as 24 lowercase hex chars. Ids
from one process sort in creation order.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/ or listings/.
"""

import itertools
import re
import secrets
import time

_ID_RE = re.compile(r"^[0-9a-f]{24}$")

_PROCESS_RANDOM = secrets.token_hex(5)
_counter = itertools.count(secrets.randbelow(0xFFFFFF))


def new_object_id() -> str:
    """Return a fresh 24-hex-char id."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{_PROCESS_RANDOM}{next(_counter) & 0xFFFFFF:06x}"


def is_valid_id(value: str) -> bool:
    """Return True if value has the shape of an id (24 lowercase hex chars)."""
    return bool(_ID_RE.match(value))
