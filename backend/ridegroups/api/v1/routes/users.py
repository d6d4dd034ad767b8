"""
User Routes

Endpoints for the signed-in user and their session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.api.deps import clear_session_cookie, get_current_user, get_session_id
from ridegroups.db.session import get_async_db
from ridegroups.features.auth import IdentityLinkingService
from ridegroups.features.users import User, UserResponse

router = APIRouter()


@router.get("/user", response_model=UserResponse)
async def get_user(user: User = Depends(get_current_user)):
    """Get current user profile."""
    return user


@router.post("/logout")
async def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Destroy the current session. Succeeds without one too."""
    await IdentityLinkingService(db).logout(session_id)
    await db.commit()
    clear_session_cookie(response)
    return {"success": True}
