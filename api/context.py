"""
api/context.py -- Process-wide application context.

AppContext bundles the settings with the two stores. Lifecycle:
  - built once in the lifespan startup (api/main.py) via AppContext.open()
  - stored on app.state.ctx for the whole process lifetime
  - closed in the lifespan shutdown

Route handlers receive it through Depends(get_context) instead of reaching
for module-level globals, which lets tests wire in isolated stores.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from auth.store import UserStore
from core.config import Settings
from listings.store import ListingStore


@dataclass
class AppContext:
    settings: Settings
    user_store: UserStore
    listings: ListingStore

    @classmethod
    def open(cls, settings: Settings) -> AppContext:
        """Connect both stores to settings.database_url."""
        return cls(
            settings=settings,
            user_store=UserStore(settings.database_url),
            listings=ListingStore(settings.database_url),
        )

    def close(self) -> None:
        self.user_store.close()
        self.listings.close()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context created at startup.

    Use as:
        @router.get("/things")
        def route(ctx: AppContext = Depends(get_context)): ...
    """
    return request.app.state.ctx
