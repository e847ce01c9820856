"""
SQLite database implementation for aggregate attestation storage.

Each aggregate is one row of the `aggregate_interval_attestations` table,
keyed by its aggregate signature. A secondary index on the slot column
backs the slot and range scans.

Rows are never updated. The primary key makes a second insert of the same
signature fail inside SQLite itself, so uniqueness does not depend on a
read-then-write sequence in Python.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path
from threading import Lock

from interval_attestations.config import DB_TIMEOUT
from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.metrics import insert_duration
from interval_attestations.types import InvalidRangeError
from interval_attestations.validation import INT64_MAX, INT64_MIN

from .accounting import check_insertable, duplicate, note_pruned, note_stored, unavailable
from .namespaces import AGGREGATES

_SELECT_COLUMNS = ", ".join(AGGREGATES.COLUMNS)

_EMPTY_RANGE = (1, 0)
"""BETWEEN bounds that match no row."""


def _column_bounds(from_slot: int, to_slot: int) -> tuple[int, int]:
    """
    Fit an inclusive slot range into the signed 64-bit column domain.

    sqlite3 cannot bind integers outside that domain, and no stored row lies
    outside it, so clamping keeps the matched set unchanged. A range that misses
    the domain entirely becomes `_EMPTY_RANGE`.
    """
    if from_slot > INT64_MAX or to_slot < INT64_MIN:
        return _EMPTY_RANGE
    return max(from_slot, INT64_MIN), min(to_slot, INT64_MAX)


class SQLiteAttestationDatabase:
    """
    SQLite implementation of the AttestationDatabase protocol.

    Stores aggregates in a single SQLite file.

    One connection is shared by all threads. Every operation, reads
    included, holds the instance lock for its whole duration, so readers
    never observe a half-applied write.
    """

    def __init__(self, path: Path | str, *, timeout: float = DB_TIMEOUT) -> None:
        """
        Initialize SQLite database.

        Creates database file and tables if they don't exist.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.
            timeout: Seconds to wait on a file lock held by another process.

        Raises:
            StoreUnavailableError: If the file cannot be opened.
        """
        self._path = Path(path) if isinstance(path, str) else path
        self._lock = Lock()
        self._closed = False

        # The timeout bounds how long a write waits on another process.
        #
        # The check_same_thread=False flag allows multiple threads to share
        # this connection. The instance lock serializes access.
        try:
            self._conn = sqlite3.connect(
                str(self._path),
                timeout=timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise unavailable("open", e) from e

        # Row factory enables dict-like access: row["column_name"].
        self._conn.row_factory = sqlite3.Row

        self._init_schema()

    @property
    def path(self) -> Path:
        """Location of the database file."""
        return self._path

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._lock, self._guard("init_schema"):
            cursor = self._conn.cursor()
            cursor.execute(AGGREGATES.CREATE_TABLE)
            cursor.execute(AGGREGATES.CREATE_INDEX)
            self._conn.commit()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Roll back and translate SQLite failures into StoreUnavailableError."""
        try:
            yield
        except sqlite3.Error as e:
            if not self._closed:
                # Report the SQLite failure, not a failed rollback.
                with suppress(sqlite3.Error):
                    self._conn.rollback()
            raise unavailable(operation, e) from e

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def insert(self, record: AggregateIntervalAttestation) -> None:
        """Store a new aggregate."""
        check_insertable(record)

        with insert_duration.time(), self._lock, self._guard("insert"):
            # Plain INSERT, never INSERT OR REPLACE.
            #
            # The primary key rejects a second row with the same signature.
            # Check and write happen in one statement, so concurrent
            # duplicates cannot both succeed.
            try:
                self._conn.execute(
                    f"""
                    INSERT INTO {AGGREGATES.TABLE_NAME} ({_SELECT_COLUMNS})
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    record.to_row(),
                )
            except sqlite3.IntegrityError:
                self._conn.rollback()
                raise duplicate(record.aggregate_signature) from None

            # Commit before releasing the lock.
            #
            # The record is durable and visible to every later read
            # once this returns.
            self._conn.commit()

        note_stored(record)

    def prune_before_slot(self, slot_number: int) -> int:
        """Remove every aggregate whose slot is strictly below `slot_number`."""
        with self._lock, self._guard("prune_before_slot"):
            cursor = self._conn.execute(
                f"DELETE FROM {AGGREGATES.TABLE_NAME} WHERE slot_number BETWEEN ? AND ?",
                _column_bounds(INT64_MIN, slot_number - 1),
            )
            removed = cursor.rowcount
            self._conn.commit()

        note_pruned(slot_number, removed)
        return removed

    # -------------------------------------------------------------------------
    # Point Lookups
    # -------------------------------------------------------------------------

    def get_by_signature(self, signature: str) -> AggregateIntervalAttestation | None:
        """Retrieve an aggregate by its signature."""
        with self._lock, self._guard("get_by_signature"):
            row = self._conn.execute(
                f"""
                SELECT {_SELECT_COLUMNS} FROM {AGGREGATES.TABLE_NAME}
                WHERE aggregate_signature = ?
                """,
                (signature,),
            ).fetchone()

        if row is None:
            return None
        return AggregateIntervalAttestation.from_row(row)

    def has_signature(self, signature: str) -> bool:
        """Check if an aggregate exists in storage."""
        with self._lock, self._guard("has_signature"):
            # SELECT 1 is an existence check; no row is decoded.
            row = self._conn.execute(
                f"SELECT 1 FROM {AGGREGATES.TABLE_NAME} WHERE aggregate_signature = ?",
                (signature,),
            ).fetchone()
        return row is not None

    # -------------------------------------------------------------------------
    # Slot Scans
    # -------------------------------------------------------------------------
    #
    # The table keeps SQLite's implicit rowid, which grows with every insert.
    # Ordering by rowid therefore reproduces insertion order.
    # Results are fetched eagerly: callers get a list, never a live cursor.

    def list_by_slot(self, slot_number: int) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate at one slot, in insertion order."""
        with self._lock, self._guard("list_by_slot"):
            rows = self._conn.execute(
                f"""
                SELECT {_SELECT_COLUMNS} FROM {AGGREGATES.TABLE_NAME}
                WHERE slot_number BETWEEN ? AND ?
                ORDER BY rowid
                """,
                _column_bounds(slot_number, slot_number),
            ).fetchall()
        return [AggregateIntervalAttestation.from_row(row) for row in rows]

    def list_by_slot_range(
        self,
        from_slot: int,
        to_slot: int,
    ) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate with a slot in `[from_slot, to_slot]`."""
        if from_slot > to_slot:
            raise InvalidRangeError(from_slot, to_slot)

        with self._lock, self._guard("list_by_slot_range"):
            rows = self._conn.execute(
                f"""
                SELECT {_SELECT_COLUMNS} FROM {AGGREGATES.TABLE_NAME}
                WHERE slot_number BETWEEN ? AND ?
                ORDER BY slot_number, rowid
                """,
                _column_bounds(from_slot, to_slot),
            ).fetchall()
        return [AggregateIntervalAttestation.from_row(row) for row in rows]

    def list_all(self) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate, ordered by slot then insertion order."""
        with self._lock, self._guard("list_all"):
            rows = self._conn.execute(
                f"""
                SELECT {_SELECT_COLUMNS} FROM {AGGREGATES.TABLE_NAME}
                ORDER BY slot_number, rowid
                """
            ).fetchall()
        return [AggregateIntervalAttestation.from_row(row) for row in rows]

    def count(self) -> int:
        """Return the number of stored aggregates."""
        with self._lock, self._guard("count"):
            row = self._conn.execute(f"SELECT COUNT(*) FROM {AGGREGATES.TABLE_NAME}").fetchone()
        return int(row[0])

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close database connection. Later operations raise StoreUnavailableError."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._conn.close()

    def __enter__(self) -> SQLiteAttestationDatabase:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
