"""
Bearer-token check for API routes.

The FastAPI dependency counterpart of the old authenticateToken
middleware: routes that need a signed-in user declare
`Depends(get_current_user)`.
"""

import logging

from fastapi import HTTPException, Header
from pydantic import BaseModel

from supashim.db.client import get_service_client
from supashim.db.request_context import set_request_context

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Caller identity handed to controllers."""
    id: str
    email: str | None
    access_token: str


async def get_current_user(authorization: str = Header(None)) -> AuthenticatedUser:
    """
    Resolve the Authorization header to a Supabase user.

    The token is checked with the service-role client, then bound to the
    request context so get_db() queries under the user's own RLS policies.
    Every failure is a 401.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    scheme, _, access_token = authorization.partition(" ")
    if scheme != "Bearer" or not access_token:
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    try:
        user_response = get_service_client().auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not user_response or not user_response.user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = user_response.user
    set_request_context(access_token=access_token)
    return AuthenticatedUser(id=user.id, email=user.email, access_token=access_token)
