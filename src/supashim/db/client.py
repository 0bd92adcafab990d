"""
Supashim - Supabase clients.

Low-level client construction. The query builder never calls these
directly; it is handed a client by the Database facade.
"""

from supabase import Client, create_client

from supashim.config import settings
from supashim.errors import ConfigurationError

# Singleton client instances
_client: Client | None = None
_service_client: Client | None = None


def get_client() -> Client:
    """
    Get the anon-key Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def get_service_client() -> Client:
    """
    Get the service-role Supabase client.

    Needed for auth administration (token validation, sign out).
    Bypasses row-level security, so never hand it to request code.
    """
    global _service_client

    if _service_client is None:
        if not settings.supabase_service_role_key:
            raise ConfigurationError("SUPABASE_SERVICE_ROLE_KEY is not set")
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_authenticated_client(access_token: str) -> Client:
    """
    Create a client that queries as the given user.

    PostgREST requests carry the user's JWT so row-level security applies.
    Not cached: one client per request token.
    """
    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )
    client.postgrest.auth(access_token)
    return client


def reset_clients() -> None:
    """Drop cached clients (used on shutdown and in tests)."""
    global _client, _service_client
    _client = None
    _service_client = None
