"""
Shared pytest fixtures for interval attestation tests.

Store fixtures are parametrized over both database implementations,
so every protocol-level test runs against SQLite and the in-memory store.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.storage import AttestationDatabase
from tests.interval_attestations.helpers import BACKENDS, make_attestation, open_backend


@pytest.fixture(params=BACKENDS)
def db(request: pytest.FixtureRequest) -> Generator[AttestationDatabase, None, None]:
    """Fresh store, once per backend."""
    database = open_backend(request.param)
    yield database
    database.close()


@pytest.fixture
def attestation() -> AggregateIntervalAttestation:
    """The reference aggregate: slot 10, value 42, 4-slot interval, 120 validators."""
    return make_attestation("A", slot=10, value=42, interval_size=4, num_validators=120)
