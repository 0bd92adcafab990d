"""
Supashim - Knex-style query builder.

Chainable methods (where, order_by, limit, offset) only record intent.
Terminal methods (select, first, insert, update, delete) consume the
builder and return a coroutine that performs one round trip:

    rows = await db("recipes").where("user_id", uid).order_by("name").limit(10)
    recipe = await db("recipes").where("id", rid).first()
    ids = await db("recipes").insert({"name": "Pancakes"})

A builder runs at most once. Reusing it raises QueryConsumedError.
"""

from typing import Any, Coroutine

from supashim.db import executor
from supashim.db.adapter import RemoteStore
from supashim.db.query import Payload, Predicate, QueryDescriptor, SortDirective
from supashim.errors import QueryConsumedError


class QueryBuilder:
    """Accumulates one query against one table."""

    def __init__(
        self,
        client: RemoteStore,
        table: str,
        range_window: int = executor.DEFAULT_RANGE_WINDOW,
    ):
        self._client = client
        self._range_window = range_window
        self._descriptor = QueryDescriptor(table=table)
        self._consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "pending"
        return f"<QueryBuilder {self._descriptor.table!r} {state}>"

    @property
    def table(self) -> str:
        return self._descriptor.table

    @property
    def descriptor(self) -> QueryDescriptor:
        """Accumulated state (read-only view for inspection)."""
        return self._descriptor

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _check(self) -> None:
        if self._consumed:
            raise QueryConsumedError(self._descriptor.table)

    def _consume(self) -> QueryDescriptor:
        self._check()
        self._consumed = True
        return self._descriptor

    # -------------------------------------------------------------------------
    # Chainable
    # -------------------------------------------------------------------------

    def where(self, field: str, value: Any) -> "QueryBuilder":
        """Add an equality filter. Multiple calls are ANDed."""
        self._check()
        self._descriptor.predicates.append(Predicate(field, value))
        return self

    def order_by(self, field: str, direction: str = "asc") -> "QueryBuilder":
        """
        Add a sort directive.

        Only the first order_by is applied; later ones are recorded
        but ignored by the remote query.
        """
        self._check()
        self._descriptor.sorts.append(SortDirective(field, direction))
        return self

    # Knex spelling
    orderBy = order_by

    def limit(self, n: int) -> "QueryBuilder":
        """Cap the number of rows. Last call wins."""
        self._check()
        self._descriptor.limit = n
        return self

    def offset(self, n: int) -> "QueryBuilder":
        """Skip rows. Last call wins."""
        self._check()
        self._descriptor.offset = n
        return self

    # -------------------------------------------------------------------------
    # Terminal
    # -------------------------------------------------------------------------

    def select(self, columns: str = "*") -> Coroutine[Any, Any, list[dict]]:
        """Run the read and return all matching rows."""
        descriptor = self._consume()
        return executor.run_select(self._client, descriptor, columns, self._range_window)

    def first(self) -> Coroutine[Any, Any, dict | None]:
        """Run the read with limit 1 and return the row, or None."""
        descriptor = self._consume()
        descriptor.limit = 1
        return self._first_row(descriptor)

    async def _first_row(self, descriptor: QueryDescriptor) -> dict | None:
        rows = await executor.run_select(self._client, descriptor, "*", self._range_window)
        return rows[0] if rows else None

    def insert(self, payload: Payload) -> Coroutine[Any, Any, list[Any]]:
        """Insert a record (or list of records) and return the new ids."""
        descriptor = self._consume()
        descriptor.insert_payload = payload
        return executor.run_insert(self._client, descriptor.table, payload)

    def update(self, payload: dict[str, Any]) -> Coroutine[Any, Any, int]:
        """Update filtered rows. Returns 1 if rows came back, else 0."""
        descriptor = self._consume()
        descriptor.update_payload = payload
        return executor.run_update(self._client, descriptor)

    def delete(self) -> Coroutine[Any, Any, int]:
        """Delete filtered rows. Returns 1 on success."""
        descriptor = self._consume()
        return executor.run_delete(self._client, descriptor)

    def __await__(self):
        # `await builder` behaves like `await builder.select()`
        return self.select().__await__()
