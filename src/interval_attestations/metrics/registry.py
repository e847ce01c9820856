"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the attestation store.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for attestation store metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Inserts
# -----------------------------------------------------------------------------

attestations_inserted = Counter(
    "interval_attestations_inserted_total",
    "Aggregate attestations stored",
    registry=REGISTRY,
)

duplicate_signatures = Counter(
    "interval_attestations_duplicates_total",
    "Inserts rejected because the aggregate signature was already stored",
    registry=REGISTRY,
)

validation_failures = Counter(
    "interval_attestations_validation_failures_total",
    "Inserts rejected by record validation",
    ["kind"],
    registry=REGISTRY,
)

degenerate_attestations = Counter(
    "interval_attestations_degenerate_total",
    "Stored aggregates with zero validators",
    registry=REGISTRY,
)

insert_duration = Histogram(
    "interval_attestations_insert_seconds",
    "Insert duration",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Storage Health
# -----------------------------------------------------------------------------

store_unavailable = Counter(
    "interval_attestations_store_unavailable_total",
    "Operations that failed because the storage medium was unavailable",
    ["operation"],
    registry=REGISTRY,
)

attestations_pruned = Counter(
    "interval_attestations_pruned_total",
    "Aggregate attestations removed by retention pruning",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
