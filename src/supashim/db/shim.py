"""
Supashim - Knex-compatible database facade.

    from supashim.db import db

    await db("users").where("email", email).first()
    await db.raw("SELECT 1")
    await db.schema.has_table("users")

Everything Knex offers beyond table queries (raw SQL, migrations,
connection pooling) has no Supabase equivalent. Those entry points
exist so old callers keep importing cleanly; they log and return a
placeholder, or raise UnsupportedOperationError in strict mode.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from supashim.db import executor
from supashim.db.adapter import RemoteStore
from supashim.db.builder import QueryBuilder
from supashim.errors import UnsupportedOperationError

logger = logging.getLogger(__name__)

LOG_PREFIX = "[SUPABASE SHIM]"
RAW_PING = "SELECT 1"
RAW_UNSUPPORTED_MESSAGE = "Raw SQL queries are not directly supported with Supabase"


@dataclass(frozen=True)
class ClientConfig:
    client: str = "supabase"


@dataclass(frozen=True)
class ClientInfo:
    """Mirror of knex.client, for code that sniffs the dialect."""

    config: ClientConfig = field(default_factory=ClientConfig)


class SchemaShim:
    """Stand-in for knex.schema."""

    def __init__(self, database: "Database"):
        self._database = database

    async def has_table(self, table: str) -> bool:
        """
        True if a trivial select on the table succeeds.

        Permission and network errors also report False.
        """
        return await executor.probe_table(self._database.remote, table)

    async def create_table(self, table: str, builder: Callable | None = None) -> bool:
        """Unsupported: tables are managed through Supabase migrations."""
        return self._database._unsupported(f"Creating tables not supported: {table}", "create_table")

    async def drop_table(self, table: str) -> bool:
        """Unsupported: tables are managed through Supabase migrations."""
        return self._database._unsupported(f"Dropping tables not supported: {table}", "drop_table")

    # Knex spellings
    hasTable = has_table
    createTable = create_table
    dropTable = drop_table


class Database:
    """
    Callable facade: db(table) starts a new query.

    Args:
        client: Supabase client (sync or async) queries run against
        range_window: rows fetched by offset() when no limit() is set
        strict: raise UnsupportedOperationError instead of returning
            placeholders for raw SQL and schema changes
    """

    def __init__(
        self,
        client: RemoteStore,
        *,
        range_window: int = executor.DEFAULT_RANGE_WINDOW,
        strict: bool = False,
    ):
        self.remote = client
        self.range_window = range_window
        self.strict = strict
        self.schema = SchemaShim(self)
        self.client = ClientInfo()

    def __call__(self, table: str) -> QueryBuilder:
        return QueryBuilder(self.remote, table, range_window=self.range_window)

    def table(self, table: str) -> QueryBuilder:
        return self(table)

    def _unsupported(self, message: str, operation: str) -> bool:
        if self.strict:
            raise UnsupportedOperationError(operation, message)
        logger.warning(f"{LOG_PREFIX} {message}")
        return True

    async def raw(self, sql: str) -> list[dict[str, Any]]:
        """
        Raw SQL pass-through. Only the connectivity ping is understood.

        Returns:
            [{"1": 1}] for "SELECT 1"; a placeholder message row otherwise.
            Nothing is sent to Supabase either way.
        """
        if sql == RAW_PING:
            return [{"1": 1}]

        if self.strict:
            raise UnsupportedOperationError("raw", sql)
        logger.warning(f"{LOG_PREFIX} Raw SQL not directly supported: {sql}")
        return [{"message": RAW_UNSUPPORTED_MESSAGE}]

    async def destroy(self) -> bool:
        """No pooled connections to close; kept for knex.destroy() callers."""
        logger.info(f"{LOG_PREFIX} Connection closed")
        return True

    def on(self, event: str, callback: Callable[..., Any]) -> "Database":
        """Accept knex event listeners. Nothing is ever emitted."""
        if event == "error":
            logger.info(f"{LOG_PREFIX} Registered error handler")
        return self


# =============================================================================
# Process-level access
# =============================================================================


def _build_database(client: RemoteStore) -> Database:
    from supashim.config import settings

    return Database(
        client,
        range_window=settings.shim_range_window,
        strict=settings.shim_strict_unsupported,
    )


class _DatabaseProxy:
    """Lazy proxy so importing `db` does not load settings or connect."""

    _instance: Database | None = None

    def _get(self) -> Database:
        if self._instance is None:
            from supashim.db.client import get_client

            self._instance = _build_database(get_client())
        return self._instance

    def __call__(self, table: str) -> QueryBuilder:
        return self._get()(table)

    def __getattr__(self, name: str):
        return getattr(self._get(), name)

    def reset(self) -> None:
        self._instance = None


db = _DatabaseProxy()


def get_db() -> Database:
    """
    Database for the current request.

    Queries run as the authenticated user when the request context
    carries an access token, otherwise through the shared anon client.
    """
    from supashim.db.client import get_authenticated_client, get_client
    from supashim.db.request_context import get_access_token

    access_token = get_access_token()
    if access_token:
        return _build_database(get_authenticated_client(access_token))
    return _build_database(get_client())
