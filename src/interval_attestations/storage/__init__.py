"""
Storage module for aggregate interval attestations.

Provides a database abstraction with a durable SQLite backend
and a dict-backed in-memory backend.
"""

from .database import AttestationDatabase
from .factory import StoreConfig, open_database
from .memory import InMemoryAttestationDatabase
from .namespaces import AGGREGATES, AggregateIntervalAttestationNamespace
from .sqlite import SQLiteAttestationDatabase

__all__ = [
    "AGGREGATES",
    "AggregateIntervalAttestationNamespace",
    "AttestationDatabase",
    "InMemoryAttestationDatabase",
    "SQLiteAttestationDatabase",
    "StoreConfig",
    "open_database",
]
