"""
Supashim - Query execution.

Translates a QueryDescriptor into Supabase request-builder calls.
One remote round trip per function. Remote errors (postgrest APIError
etc.) propagate unchanged: no wrapping, no retry.
"""

import asyncio
import inspect
import logging
from typing import Any

from supashim.db.adapter import RemoteStore
from supashim.db.query import Payload, QueryDescriptor

logger = logging.getLogger(__name__)

DEFAULT_RANGE_WINDOW = 1000


async def _execute(query: Any) -> Any:
    """Run a request builder without blocking the event loop."""
    if inspect.iscoroutinefunction(query.execute):
        return await query.execute()

    # Sync client: the HTTP call blocks, so it runs on a worker thread
    response = await asyncio.to_thread(query.execute)
    if inspect.isawaitable(response):
        response = await response
    return response


def _apply_filters(query: Any, descriptor: QueryDescriptor) -> Any:
    """Apply every equality predicate, in order."""
    for predicate in descriptor.predicates:
        query = query.eq(predicate.field, predicate.value)
    return query


async def run_select(
    client: RemoteStore,
    descriptor: QueryDescriptor,
    columns: str = "*",
    range_window: int = DEFAULT_RANGE_WINDOW,
) -> list[dict]:
    """
    Read rows matching the descriptor.

    Returns:
        List of rows (empty when nothing matched)
    """
    query = client.table(descriptor.table).select(columns)
    query = _apply_filters(query, descriptor)

    sort = descriptor.effective_sort
    if sort is not None:
        if len(descriptor.sorts) > 1:
            logger.debug(
                f"{descriptor.table}: ignoring {len(descriptor.sorts) - 1} extra order_by directive(s)"
            )
        query = query.order(sort.field, desc=not sort.ascending)

    # range() sets PostgREST's limit itself; a separate limit() would repeat it
    row_range = descriptor.row_range(range_window)
    if row_range is not None:
        query = query.range(*row_range)
    elif descriptor.limit is not None:
        query = query.limit(descriptor.limit)

    response = await _execute(query)
    return response.data or []


async def run_insert(client: RemoteStore, table: str, payload: Payload) -> list[Any]:
    """
    Insert one record or a batch.

    Supabase echoes the inserted rows back by default.

    Returns:
        The `id` of each inserted row (empty when nothing was echoed)
    """
    response = await _execute(client.table(table).insert(payload))
    return [row.get("id") for row in response.data or []]


async def run_update(client: RemoteStore, descriptor: QueryDescriptor) -> int:
    """
    Update rows matching the descriptor's predicates.

    Returns 1 if the response carried any rows, else 0. This is NOT an
    affected-row count; callers written against Knex should only treat
    it as truthy/falsy.
    """
    query = client.table(descriptor.table).update(descriptor.update_payload)
    query = _apply_filters(query, descriptor)

    response = await _execute(query)
    return 1 if response.data else 0


async def run_delete(client: RemoteStore, descriptor: QueryDescriptor) -> int:
    """
    Delete rows matching the descriptor's predicates.

    Always returns 1 on success, regardless of how many rows went.
    """
    query = client.table(descriptor.table).delete()
    query = _apply_filters(query, descriptor)

    await _execute(query)
    return 1


async def probe_table(client: RemoteStore, table: str) -> bool:
    """
    Check whether a table exists by selecting from it.

    Any failure counts as "missing", including permission and network
    errors; the probe cannot tell them apart.
    """
    try:
        await _execute(client.table(table).select("count").limit(1))
    except Exception as e:
        logger.debug(f"Table probe for '{table}' failed: {e}")
        return False
    return True
