"""
Auth Routes

Endpoints for signing in:
- /auth/login - Email login (creates the account on first use)
- /auth/signup - Local signup
- /auth/demo - Demo account
- /auth/google - Initiate Google OAuth flow
- /auth/google/callback - Handle Google OAuth callback
"""

import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.api.deps import frontend_redirect, get_google_oauth, set_session_cookie
from ridegroups.db.session import get_async_db
from ridegroups.exceptions import RideGroupsError
from ridegroups.features.auth import IdentityLinkingService, LinkedSession
from ridegroups.features.google import GoogleOAuth
from ridegroups.features.users import AuthResponse, LoginRequest, SignupRequest, UserResponse
from ridegroups.shared.units import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory state storage (for CSRF protection)
# In production, use Redis or database
_oauth_states: dict[str, dict] = {}
STATE_TTL = timedelta(minutes=10)


def _prune_states() -> None:
    cutoff = utcnow() - STATE_TTL
    for state in [s for s, data in _oauth_states.items() if data["created_at"] < cutoff]:
        del _oauth_states[state]


def _auth_response(response: Response, linked: LinkedSession) -> AuthResponse:
    set_session_cookie(response, linked.session)
    return AuthResponse(
        user=UserResponse.model_validate(linked.user),
        created=linked.created,
    )


# =============================================================================
# Local
# =============================================================================

@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Email login.

    The password is not verified. An unknown email creates a local account.
    """
    linked = await IdentityLinkingService(db).login_local(data)
    await db.commit()
    return _auth_response(response, linked)


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    data: SignupRequest,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
):
    """Create a local account. Fails if the email or username is taken."""
    linked = await IdentityLinkingService(db).signup_local(data)
    await db.commit()
    return _auth_response(response, linked)


@router.post("/demo", response_model=AuthResponse)
async def demo_login(
    response: Response,
    db: AsyncSession = Depends(get_async_db),
):
    linked = await IdentityLinkingService(db).demo_login()
    await db.commit()
    return _auth_response(response, linked)


# =============================================================================
# Google OAuth Flow
# =============================================================================

@router.get("/google")
async def google_auth(oauth: GoogleOAuth = Depends(get_google_oauth)):
    """Initiate Google OAuth flow."""
    if not oauth.configured:
        raise HTTPException(
            status_code=503,
            detail="Google sign-in not configured"
        )

    _prune_states()
    state = secrets.token_urlsafe(32)
    _oauth_states[state] = {"created_at": utcnow()}

    logger.info("Google OAuth initiated")
    return RedirectResponse(url=oauth.build_authorization_url(state))


@router.get("/google/callback")
async def google_callback(
    code: str = Query(None),
    state: str = Query(None),
    error: str = Query(None),
    oauth: GoogleOAuth = Depends(get_google_oauth),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Handle Google OAuth callback.

    Resolves the Google profile to a user by email and signs them in.
    Any failure sends the browser back to the login page.
    """
    failure = frontend_redirect("/login?error=google")

    if error:
        logger.warning(f"Google OAuth error: {error}")
        return failure

    if not state or _oauth_states.pop(state, None) is None:
        logger.warning("Invalid Google OAuth state")
        return failure

    if not code:
        logger.warning("Google callback without code")
        return failure

    try:
        tokens = await oauth.exchange_code(code)
        profile = await oauth.get_profile(tokens["access_token"])
        linked = await IdentityLinkingService(db).link_google(profile)
        await db.commit()
    except (RideGroupsError, SQLAlchemyError) as e:
        await db.rollback()
        logger.error(f"Google sign-in failed: {e!r}")
        return failure

    redirect = frontend_redirect("/dashboard")
    set_session_cookie(redirect, linked.session)
    return redirect
