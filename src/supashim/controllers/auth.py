"""
Auth controllers.

Session bookkeeping goes through the query builder like every other
controller; token revocation goes through Supabase auth admin.
"""

import logging

from supashim.config import settings
from supashim.db import get_db
from supashim.db.client import get_service_client
from supashim.web.auth import AuthenticatedUser

logger = logging.getLogger(__name__)


async def logout(user: AuthenticatedUser) -> dict:
    """
    Log a user out.

    Removes the user's stored session rows, then revokes the access
    token so refresh tokens issued with it stop working.
    """
    db = get_db()
    await db(settings.shim_sessions_table).where("user_id", user.id).delete()

    get_service_client().auth.admin.sign_out(user.access_token)
    logger.info(f"User {user.id} logged out")

    return {"success": True, "message": "Logged out successfully"}
