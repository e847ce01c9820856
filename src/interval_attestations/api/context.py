"""Application state shared between the server and its handlers."""

from __future__ import annotations

from collections.abc import Callable

from aiohttp import web

from interval_attestations.storage import AttestationDatabase

type StoreGetter = Callable[[], AttestationDatabase | None]
"""Callable returning the current store, or None before it is opened."""

STORE_GETTER = web.AppKey("store_getter", StoreGetter)
"""Application key under which the server registers its store getter."""


def require_store(request: web.Request) -> AttestationDatabase:
    """
    Resolve the store for a request.

    Raises:
        web.HTTPServiceUnavailable: If no store is attached yet.
    """
    store_getter = request.app.get(STORE_GETTER)
    store = store_getter() if store_getter else None

    if store is None:
        raise web.HTTPServiceUnavailable(reason="Store not initialized")
    return store
