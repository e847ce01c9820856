"""
Query client for reading aggregates from a running store's HTTP API.

Consumers that do not share a process with the store (dashboards, reward
calculators, other aggregators) read through this client instead of
opening the database file themselves.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from interval_attestations.containers import AggregateIntervalAttestation

from .routes import AGGREGATES_PATH

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
"""HTTP request timeout in seconds."""


class AttestationClientError(Exception):
    """
    Error while querying a remote store.

    Raised for network failures, non-success responses and malformed bodies.
    A missing signature is not an error: `fetch_aggregate` returns None.
    """


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise AttestationClientError(f"Response body is not JSON: {e}") from e


def _decode(item: Any) -> AggregateIntervalAttestation:
    try:
        return AggregateIntervalAttestation.model_validate(item)
    except ValidationError as e:
        raise AttestationClientError(f"Malformed aggregate in response: {e}") from e


async def _get(url: str, params: dict[str, int] | None = None) -> httpx.Response:
    """Issue one GET request, mapping transport and status failures to AttestationClientError."""
    try:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            response = await client.get(url, params=params)
            if response.status_code != httpx.codes.NOT_FOUND:
                response.raise_for_status()
            return response
    except httpx.RequestError as exc:
        raise AttestationClientError(
            f"Network error while connecting to {exc.request.url}: {exc}"
        ) from exc
    except httpx.HTTPStatusError as exc:
        raise AttestationClientError(
            f"HTTP error {exc.response.status_code}: {exc.response.text[:200]}"
        ) from exc


async def fetch_aggregates(
    url: str,
    *,
    slot: int | None = None,
    from_slot: int | None = None,
    to_slot: int | None = None,
) -> list[AggregateIntervalAttestation]:
    """
    List aggregates stored behind a remote API.

    With no filter every aggregate is returned. `slot` selects one slot;
    `from_slot` and `to_slot` select an inclusive range and must be given together.

    Args:
        url: Base URL of the store API (e.g., "http://localhost:5054").
        slot: Only aggregates at this slot.
        from_slot: Lower bound of the slot range.
        to_slot: Upper bound of the slot range.

    Returns:
        Aggregates ordered by slot, then insertion order.

    Raises:
        ValueError: If the filters are combined incorrectly.
        AttestationClientError: If the request fails or the body is malformed.
    """
    wants_range = from_slot is not None or to_slot is not None
    if slot is not None and wants_range:
        raise ValueError("slot cannot be combined with from_slot/to_slot")
    if wants_range and (from_slot is None or to_slot is None):
        raise ValueError("from_slot and to_slot must be given together")

    params: dict[str, int] = {}
    if slot is not None:
        params["slot"] = slot
    elif from_slot is not None and to_slot is not None:
        params["from_slot"] = from_slot
        params["to_slot"] = to_slot

    full_url = f"{url.rstrip('/')}{AGGREGATES_PATH}"
    logger.debug(f"Fetching aggregates from {full_url} with {params}")

    response = await _get(full_url, params)
    if response.status_code == httpx.codes.NOT_FOUND:
        raise AttestationClientError(f"No aggregate endpoint at {full_url}")

    body = _json(response)
    if not isinstance(body, list):
        raise AttestationClientError(f"Expected a JSON array, got {type(body).__name__}")
    return [_decode(item) for item in body]


async def fetch_aggregate(url: str, signature: str) -> AggregateIntervalAttestation | None:
    """
    Fetch one aggregate by signature from a remote API.

    Returns:
        The aggregate, or None when the remote store does not hold it.

    Raises:
        AttestationClientError: If the request fails or the body is malformed.
    """
    # Signatures are opaque; escape every reserved character, "/" included.
    full_url = f"{url.rstrip('/')}{AGGREGATES_PATH}/{quote(signature, safe='')}"

    response = await _get(full_url)
    if response.status_code == httpx.codes.NOT_FOUND:
        return None
    return _decode(_json(response))
