#!/usr/bin/env python3
"""
Harve Share -- command line entry point.

Usage:
  python main.py serve
  python main.py serve --port 8000 --reload
  python main.py seed-supplies supplies.json

Environment variables (or .env):
  SECRET_KEY / JWT_SECRET       Token signing key, at least 32 characters.
  TOKEN_EXPIRE_SECONDS / EXPIRES_IN
                                Token lifetime, e.g. 3600 or "1h".
  DATABASE_URL                  SQLAlchemy URL of the backing database.
  HOST, PORT                    Listen address for `serve`.
  DEBUG=true                    Development mode (generates a throwaway key).
"""

import argparse
import json
from pathlib import Path
from typing import Any, Optional

from core.config import get_settings


def _load_documents(path: str) -> Optional[list[dict[str, Any]]]:
    """Read a JSON array of objects from path. Returns None on any problem.

    Resolves symlinks and verifies the path is a regular file before reading.
    """
    file_path = Path(path).resolve()
    if not file_path.is_file():
        print(f"  [!] '{path}' is not a readable file.")
        return None
    try:
        docs = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        print(f"  [!] Could not read file '{path}': {e}")
        return None
    except json.JSONDecodeError as e:
        print(f"  [!] '{path}' is not valid JSON: {e}")
        return None
    if not isinstance(docs, list) or not all(isinstance(d, dict) for d in docs):
        print(f"  [!] '{path}' must contain a JSON array of objects.")
        return None
    return docs


def seed_supplies(path: str, db_url: str) -> Optional[int]:
    """Insert every supply in the file. Returns the number inserted, or None on error."""
    from listings.models import SUPPLIES
    from listings.store import ListingStore

    docs = _load_documents(path)
    if docs is None:
        return None
    store = ListingStore(db_url)
    try:
        ids = store.insert_many(SUPPLIES, docs)
    finally:
        store.close()
    print(f"  Inserted {len(ids)} supplies.")
    return len(ids)


def serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run("asgi:app", host=host, port=port, reload=reload)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="harve-share",
        description="Harve Share REST backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve
  PORT=8080 python main.py serve
  python main.py serve --host 127.0.0.1 --port 8000 --reload
  python main.py seed-supplies supplies.json
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve_p = sub.add_parser("serve", help="Run the API server")
    serve_p.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve_p.add_argument("--port", type=int, default=None, help="Listen port (default: PORT setting)")
    serve_p.add_argument("--reload", action="store_true", help="Restart on code changes (development)")

    seed_p = sub.add_parser("seed-supplies", help="Load supply listings from a JSON file")
    seed_p.add_argument("file", metavar="PATH", help="JSON file holding an array of supply objects")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = get_settings()

    if args.command == "serve":
        serve(args.host or settings.host, args.port or settings.port, args.reload)
        return 0

    # seed-supplies
    inserted = seed_supplies(args.file, settings.database_url)
    return 1 if inserted is None else 0


if __name__ == "__main__":
    raise SystemExit(main())
