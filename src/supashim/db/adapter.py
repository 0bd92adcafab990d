"""
Remote Store Protocol.

The capability set the query builder needs from its backing store.
Supabase's sync Client and AsyncClient both satisfy it: table() returns
a PostgREST request builder supporting .select(), .insert(), .update(),
.delete(), .eq(), .order(), .limit(), .range() and .execute().

execute() may return the response directly (sync client) or an
awaitable (async client); the executor handles both.
"""

from typing import Any, Protocol


class RemoteStore(Protocol):
    """Anything exposing a Supabase-style table() entry point."""

    def table(self, name: str) -> Any:
        """Return a PostgREST-style request builder for the given table."""
        ...
