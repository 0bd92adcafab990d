"""
Per-request Supabase access token.

The auth dependency stores the caller's JWT here once it has been
validated; get_db() reads it back so controllers query as that user
(row-level security) without receiving the token as an argument.
"""

from contextvars import ContextVar
from typing import Optional

_access_token: ContextVar[Optional[str]] = ContextVar("access_token", default=None)


def set_request_context(access_token: str | None = None):
    """Bind the validated access token to the current request."""
    if access_token:
        _access_token.set(access_token)


def get_access_token() -> str | None:
    return _access_token.get()


def clear_request_context():
    """Forget the token; routes call this once their controller returns."""
    _access_token.set(None)
