"""API endpoint handlers."""

from . import attestations, health, metrics

__all__ = [
    "attestations",
    "health",
    "metrics",
]
