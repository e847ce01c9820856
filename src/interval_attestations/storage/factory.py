"""Store configuration and construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from interval_attestations.config import DB_PATH, DB_TIMEOUT

from .database import AttestationDatabase
from .memory import InMemoryAttestationDatabase
from .sqlite import SQLiteAttestationDatabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Configuration for the attestation store."""

    path: Path | str = DB_PATH
    """SQLite database file. Ignored when `in_memory` is set."""

    timeout: float = DB_TIMEOUT
    """Seconds a write waits on a locked database file."""

    in_memory: bool = False
    """Use the dict-backed store instead of SQLite."""


def open_database(config: StoreConfig) -> AttestationDatabase:
    """
    Open the store described by `config`.

    Raises:
        StoreUnavailableError: If the SQLite file cannot be opened.
    """
    if config.in_memory:
        logger.info("Using in-memory attestation store")
        return InMemoryAttestationDatabase()

    logger.info(f"Opening SQLite attestation store at {config.path}")
    return SQLiteAttestationDatabase(config.path, timeout=config.timeout)
