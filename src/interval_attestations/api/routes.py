"""API route definitions."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from .endpoints import attestations, health, metrics

AGGREGATES_PATH = "/v0/aggregate_interval_attestations"
"""Collection path for aggregate interval attestations."""

ROUTES: dict[str, Callable[[web.Request], Awaitable[web.Response]]] = {
    "/v0/health": health.handle,
    "/metrics": metrics.handle,
    AGGREGATES_PATH: attestations.handle_list,
    AGGREGATES_PATH + "/{signature}": attestations.handle_get,
}
"""All API routes mapped to their handlers. Every route is a GET."""
