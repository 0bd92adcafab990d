"""
Supashim - Error types.

Remote-store errors (postgrest APIError and friends) are never wrapped;
these cover conditions raised by the shim itself.
"""


class ShimError(Exception):
    """Base class for errors raised by the shim itself."""


class QueryConsumedError(ShimError):
    """A query builder was used again after a terminal call."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f"Query on '{table}' was already executed; start a new one with db('{table}')"
        )


class UnsupportedOperationError(ShimError):
    """Operation has no Supabase equivalent (raw SQL, schema changes)."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        message = f"{operation} is not supported with Supabase"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConfigurationError(ShimError):
    """Required Supabase settings are missing."""
