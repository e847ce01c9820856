"""Aggregate interval attestation endpoint handlers."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

from aiohttp import web

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.types import InvalidRangeError, StoreUnavailableError

from ..context import require_store


def _render(records: list[AggregateIntervalAttestation]) -> web.Response:
    return web.json_response([record.model_dump(mode="json", by_alias=True) for record in records])


def _parse_slot(query: Mapping[str, str], name: str) -> int:
    """Read an integer slot parameter, answering 400 when it is missing or malformed."""
    raw = query.get(name)
    if raw is None:
        raise web.HTTPBadRequest(reason=f"Missing query parameter: {name}")
    try:
        return int(raw)
    except ValueError:
        raise web.HTTPBadRequest(reason=f"Query parameter {name} must be an integer") from None


async def handle_list(request: web.Request) -> web.Response:
    """
    Handle aggregate listing request.

    Query parameters (all optional, mutually exclusive groups):
        - slot: Only aggregates at this slot.
        - from_slot, to_slot: Only aggregates in this inclusive slot range.
          Both bounds are required when either is given.

    Response: JSON array of aggregates with camelCase fields
        (aggregateSignature, slotNumber, value, intervalSize, numValidators),
        ordered by slot then insertion order.

    Status Codes:
        200 OK: Aggregates returned (possibly empty).
        400 Bad Request: Malformed parameters or from_slot > to_slot.
        503 Service Unavailable: Store not initialized or storage failure.
    """
    store = require_store(request)
    query = request.query
    wants_range = "from_slot" in query or "to_slot" in query

    if "slot" in query and wants_range:
        raise web.HTTPBadRequest(reason="slot cannot be combined with from_slot/to_slot")

    # Store calls block on SQLite; keep them off the event loop.
    try:
        if "slot" in query:
            slot = _parse_slot(query, "slot")
            records = await asyncio.to_thread(store.list_by_slot, slot)
        elif wants_range:
            from_slot = _parse_slot(query, "from_slot")
            to_slot = _parse_slot(query, "to_slot")
            records = await asyncio.to_thread(store.list_by_slot_range, from_slot, to_slot)
        else:
            records = await asyncio.to_thread(store.list_all)
    except InvalidRangeError as e:
        raise web.HTTPBadRequest(reason=e.message) from e
    except StoreUnavailableError as e:
        raise web.HTTPServiceUnavailable(reason=e.message) from e

    return _render(records)


async def handle_get(request: web.Request) -> web.Response:
    """
    Handle single aggregate request.

    Path parameter:
        - signature: Aggregate signature of the record.

    Response: JSON object with camelCase fields.

    Status Codes:
        200 OK: Aggregate returned.
        404 Not Found: No aggregate with this signature.
        503 Service Unavailable: Store not initialized or storage failure.
    """
    store = require_store(request)
    signature = request.match_info["signature"]

    try:
        record = await asyncio.to_thread(store.get_by_signature, signature)
    except StoreUnavailableError as e:
        raise web.HTTPServiceUnavailable(reason=e.message) from e

    if record is None:
        raise web.HTTPNotFound(reason="Aggregate not found")

    return web.json_response(record.model_dump(mode="json", by_alias=True))
