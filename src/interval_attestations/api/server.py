"""
API server for querying stored aggregate interval attestations.

Provides HTTP endpoints for:
- /v0/aggregate_interval_attestations - List aggregates (all, by slot, or by slot range)
- /v0/aggregate_interval_attestations/{signature} - Fetch one aggregate
- /v0/health - Health check endpoint
- /metrics - Prometheus metrics endpoint

The surface is read-only. Producers insert through the Python store API.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from aiohttp import web

from interval_attestations.config import API_HOST, API_PORT
from interval_attestations.storage import AttestationDatabase

from .context import STORE_GETTER, StoreGetter
from .routes import ROUTES

logger = logging.getLogger(__name__)


def _no_store() -> AttestationDatabase | None:
    """Default store getter that returns None."""
    return None


def create_app(store_getter: StoreGetter = _no_store) -> web.Application:
    """Build the aiohttp application with every route registered."""
    app = web.Application()
    app[STORE_GETTER] = store_getter
    app.add_routes([web.get(path, handler) for path, handler in ROUTES.items()])
    return app


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = API_HOST
    """Host address to bind to."""

    port: int = API_PORT
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP API server for aggregate queries.

    Uses aiohttp to handle HTTP protocol details efficiently.
    """

    config: ApiServerConfig
    """Server configuration."""

    store_getter: StoreGetter = _no_store
    """Callable that returns the current store instance."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def store(self) -> AttestationDatabase | None:
        """Get the current store instance."""
        return self.store_getter()

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        self._runner = web.AppRunner(create_app(self.store_getter))
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info(f"API server listening on {self.config.host}:{self.config.port}")

    async def run(self) -> None:
        """
        Run the API server until shutdown.

        This method blocks until stop() is called.
        """
        await self.start()

        # Keep running until stopped
        while self._runner is not None:
            await asyncio.sleep(1)

    def stop(self) -> None:
        """Request graceful shutdown."""
        if self._runner is not None:
            asyncio.create_task(self._async_stop())

    async def _async_stop(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("API server stopped")
