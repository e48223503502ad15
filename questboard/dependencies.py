"""Dependency injection for FastAPI endpoints.

The event store and view cache are created once in the application lifespan
and kept on ``app.state``. Controllers receive them through these
dependencies rather than importing a module-level handle.

Usage in controllers:
    from questboard.dependencies import Store

    @router.get("/events/{event_id}")
    async def get_event(event_id: str, store: Store):
        return await store.get_event(event_id)
"""

from typing import Annotated

from fastapi import Depends, Request

from questboard.cache import EventViewCache
from questboard.config import Settings, get_settings
from questboard.db import EventStore
from questboard.errors import ServiceUnavailableError


def get_store(request: Request) -> EventStore:
    """Get the event store.

    Raises:
        ServiceUnavailableError: If the store was not initialized.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ServiceUnavailableError(detail="Event store not initialized")
    return store


def get_optional_cache(request: Request) -> EventViewCache | None:
    """Get the view cache, or None when caching is disabled."""
    return getattr(request.app.state, "cache", None)


Store = Annotated[EventStore, Depends(get_store)]
OptionalCache = Annotated[EventViewCache | None, Depends(get_optional_cache)]
AppSettings = Annotated[Settings, Depends(get_settings)]
