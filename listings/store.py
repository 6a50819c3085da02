"""
listings/store.py -- SQLAlchemy-backed document store for supplies and posts.

Uses SQLAlchemy Core (not ORM). Each collection is one table holding the
document body as JSON text next to its id, so the schema never has to know
which fields a listing carries. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ListingStore is the repository (one
interface for every collection); _row_to_document is the mapper. Route
handlers never touch SQL directly.

Write semantics follow a document database:
  insert_one  -- fresh id, body stored as given (minus any "_id")
  update_one  -- "$set": only the given top-level fields change; with
                 upsert=True a missing document is created under doc_id
  delete_one  -- removes at most one document

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ListingStore("sqlite:///harveshare.db")
    result = store.insert_one("posts", {"title": "Spare tent"})
    store.find_one("posts", result.inserted_id)
    store.close()
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine

from core.ids import new_object_id
from listings.models import COLLECTIONS, DeleteResult, Document, InsertResult, UpdateResult

logger = logging.getLogger("harveshare.listings")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()


def _collection_table(name: str) -> Table:
    return Table(
        name,
        metadata,
        Column("id", String(24), primary_key=True),
        Column("data", Text, nullable=False),  # JSON object serialized as text
        Column("created_at", String(32), nullable=False),
    )


_tables: dict[str, Table] = {name: _collection_table(name) for name in COLLECTIONS}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _strip_id(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k != "_id"}


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingStore:
    """Repository for schema-less listing documents."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def _table(self, collection: str) -> Table:
        try:
            return _tables[collection]
        except KeyError:
            raise ValueError(f"Unknown collection {collection!r}") from None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_all(self, collection: str) -> list[Document]:
        """Return every document in the collection, oldest first."""
        table = self._table(collection)
        with self.engine.connect() as conn:
            rows = conn.execute(table.select().order_by(table.c.created_at, table.c.id)).fetchall()
        return [_row_to_document(collection, r) for r in rows]

    def find_one(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document with doc_id, or None if it does not exist."""
        table = self._table(collection)
        with self.engine.connect() as conn:
            row = conn.execute(table.select().where(table.c.id == doc_id)).fetchone()
        return _row_to_document(collection, row) if row is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_one(self, collection: str, data: dict[str, Any]) -> InsertResult:
        """Store data as a new document and return its id."""
        table = self._table(collection)
        doc_id = new_object_id()
        with self.engine.connect() as conn:
            conn.execute(
                table.insert().values(
                    id=doc_id,
                    data=json.dumps(_strip_id(data)),
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return InsertResult(inserted_id=doc_id)

    def insert_many(self, collection: str, docs: Iterable[dict[str, Any]]) -> list[str]:
        """Insert several documents in one transaction. Returns their ids in order."""
        table = self._table(collection)
        rows = [
            {"id": new_object_id(), "data": json.dumps(_strip_id(doc)), "created_at": _now_iso()} for doc in docs
        ]
        if not rows:
            return []
        with self.engine.begin() as conn:
            conn.execute(table.insert(), rows)
        logger.info("Inserted %d documents into %s", len(rows), collection)
        return [r["id"] for r in rows]

    def update_one(self, collection: str, doc_id: str, fields: dict[str, Any], upsert: bool = True) -> UpdateResult:
        """Set the given top-level fields on one document.

        Fields not named in `fields` keep their stored values. When no
        document has doc_id and upsert is True, one is created with exactly
        `fields` as its body.
        """
        table = self._table(collection)
        fields = _strip_id(fields)
        with self.engine.begin() as conn:
            row = conn.execute(table.select().where(table.c.id == doc_id)).fetchone()
            if row is None:
                if not upsert:
                    return UpdateResult(matched_count=0, modified_count=0)
                conn.execute(table.insert().values(id=doc_id, data=json.dumps(fields), created_at=_now_iso()))
                return UpdateResult(matched_count=0, modified_count=0, upserted_id=doc_id)

            current = json.loads(row.data)
            merged = {**current, **fields}
            if merged == current:
                return UpdateResult(matched_count=1, modified_count=0)
            conn.execute(table.update().where(table.c.id == doc_id).values(data=json.dumps(merged)))
        return UpdateResult(matched_count=1, modified_count=1)

    def delete_one(self, collection: str, doc_id: str) -> DeleteResult:
        table = self._table(collection)
        with self.engine.connect() as conn:
            result = conn.execute(table.delete().where(table.c.id == doc_id))
            conn.commit()
        return DeleteResult(deleted_count=result.rowcount)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_document(collection: str, row) -> Document:
    return Document(
        id=row.id,
        collection=collection,
        data=json.loads(row.data),
        created_at=row.created_at,
    )
