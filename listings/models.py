"""
listings/models.py -- Domain dataclasses for the listing document store.

These are pure data containers with zero logic. Supplies and posts are
schema-less: a Document carries whatever JSON object the client stored.
The *Result classes mirror the acknowledgements a document database returns
for writes; api/models.py maps them onto the wire format.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

SUPPLIES = "supplies"
POSTS = "posts"
COLLECTIONS = (SUPPLIES, POSTS)


@dataclass
class Document:
    """One stored listing.

    id is a 24-char lowercase hex string, exposed to clients as "_id".
    data never contains "_id" itself; the store strips it on write.
    """

    id: str
    collection: str
    data: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class InsertResult:
    inserted_id: str
    acknowledged: bool = True


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None
    acknowledged: bool = True


@dataclass
class DeleteResult:
    deleted_count: int
    acknowledged: bool = True
