"""
API server module for aggregate queries and service status.

Provides HTTP endpoints for:
- /v0/aggregate_interval_attestations - List or fetch stored aggregates
- /v0/health - Health check endpoint
- /metrics - Prometheus metrics endpoint

And a client for reading those endpoints from another process.
"""

from .client import AttestationClientError, fetch_aggregate, fetch_aggregates
from .context import STORE_GETTER, StoreGetter
from .server import ApiServer, ApiServerConfig, create_app

__all__ = [
    "STORE_GETTER",
    "ApiServer",
    "ApiServerConfig",
    "AttestationClientError",
    "StoreGetter",
    "create_app",
    "fetch_aggregate",
    "fetch_aggregates",
]
