"""
Strava Routes

Endpoints for Strava integration:
- /strava/auth - Authorization URL (sign in with Strava)
- /strava/connect - Authorization URL for a signed-in user
- /strava/callback - Handle OAuth callback
- /strava/sync - Import rides
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.api.deps import (
    frontend_redirect,
    get_current_user,
    get_optional_user,
    get_strava_client,
    set_session_cookie,
)
from ridegroups.db.session import get_async_db
from ridegroups.exceptions import RideGroupsError
from ridegroups.features.auth import IdentityLinkingService
from ridegroups.features.strava import StravaClient
from ridegroups.features.strava.sync import ActivityImportService
from ridegroups.features.users import User

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================

class AuthUrlResponse(BaseModel):
    auth_url: str


class SyncResponse(BaseModel):
    message: str
    count: int


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/auth", response_model=AuthUrlResponse)
async def strava_auth(client: StravaClient = Depends(get_strava_client)):
    """Authorization URL for signing in with Strava."""
    return AuthUrlResponse(auth_url=client.build_authorization_url())


@router.post("/connect", response_model=AuthUrlResponse)
async def strava_connect(
    user: User = Depends(get_current_user),
    client: StravaClient = Depends(get_strava_client),
):
    """
    Authorization URL for linking Strava to the signed-in user.

    The callback sees the same session cookie and attaches the athlete
    to this user.
    """
    logger.info(f"Strava connect initiated for user {user.id}")
    return AuthUrlResponse(auth_url=client.build_authorization_url())


@router.get("/callback")
async def strava_callback(
    code: str = Query(None),
    error: str = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    client: StravaClient = Depends(get_strava_client),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Handle Strava OAuth callback.

    Exchanges the code, fetches the athlete and links it to a user by
    athlete id. Any failure sends the browser back to the login page.
    """
    failure = frontend_redirect("/login?error=strava")

    if error or not code:
        logger.warning(f"Strava OAuth error: {error or 'missing code'}")
        return failure

    try:
        tokens = await client.exchange_code(code)
        athlete = await client.get_athlete(tokens.access_token)
        linked = await IdentityLinkingService(db).link_strava(tokens, athlete, current_user)
        await db.commit()
    except (RideGroupsError, SQLAlchemyError) as e:
        await db.rollback()
        logger.error(f"Strava sign-in failed: {e!r}")
        return failure

    logger.info(f"Strava connected: athlete_id={athlete.id}, user={linked.user.id}")

    redirect = frontend_redirect("/dashboard")
    set_session_cookie(redirect, linked.session)
    return redirect


# =============================================================================
# Sync
# =============================================================================

@router.post("/sync", response_model=SyncResponse)
async def strava_sync(
    user: User = Depends(get_current_user),
    client: StravaClient = Depends(get_strava_client),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Import the latest page of Strava rides.

    Not deduplicated: calling twice stores the rides twice.
    """
    count = await ActivityImportService(db, client).sync_activities(user)
    await db.commit()
    return SyncResponse(message=f"Synced {count} activities", count=count)
