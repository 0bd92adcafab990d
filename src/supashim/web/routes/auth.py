"""
Auth API endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from supashim.controllers import auth as auth_controller
from supashim.db.request_context import clear_request_context
from supashim.web.auth import AuthenticatedUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/logout")
async def logout(user: AuthenticatedUser = Depends(get_current_user)) -> dict:
    """User logout endpoint."""
    try:
        return await auth_controller.logout(user)
    except Exception as e:
        logger.error(f"Logout failed for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Logout failed")
    finally:
        clear_request_context()
