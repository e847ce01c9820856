"""
Global configuration for the interval attestation store.

This module contains environment-specific settings read once at import time.
Component-level settings live in frozen dataclasses next to the components.
"""

import os

_SUPPORTED_ENVS: list[str] = ["prod", "test"]

ENV = os.environ.get("INTERVAL_ATTESTATIONS_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if ENV not in _SUPPORTED_ENVS:
    raise ValueError(
        f"Invalid INTERVAL_ATTESTATIONS_ENV environment variable: '{ENV}'. "
        f"Supported values: {_SUPPORTED_ENVS}"
    )

DB_PATH = os.environ.get("INTERVAL_ATTESTATIONS_DB", "interval_attestations.db")
"""Default SQLite database file. Use ':memory:' for a throwaway store."""

DB_TIMEOUT = float(os.environ.get("INTERVAL_ATTESTATIONS_DB_TIMEOUT", "5.0"))
"""Seconds a write waits on a locked database file before failing."""

if DB_TIMEOUT <= 0:
    raise ValueError(f"INTERVAL_ATTESTATIONS_DB_TIMEOUT must be positive, got {DB_TIMEOUT}")

API_HOST = os.environ.get("INTERVAL_ATTESTATIONS_API_HOST", "0.0.0.0")
"""Default bind address for the HTTP query API."""

API_PORT = int(os.environ.get("INTERVAL_ATTESTATIONS_API_PORT", "5054"))
"""Default port for the HTTP query API."""
