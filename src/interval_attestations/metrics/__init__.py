"""
Metrics module for observability.

Provides counters and histograms for tracking attestation store behavior.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    attestations_inserted,
    attestations_pruned,
    degenerate_attestations,
    duplicate_signatures,
    generate_metrics,
    insert_duration,
    store_unavailable,
    validation_failures,
)

__all__ = [
    "REGISTRY",
    "attestations_inserted",
    "attestations_pruned",
    "degenerate_attestations",
    "duplicate_signatures",
    "generate_metrics",
    "insert_duration",
    "store_unavailable",
    "validation_failures",
]
