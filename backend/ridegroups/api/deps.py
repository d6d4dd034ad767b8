"""
Shared route dependencies.

Session lookup from the cookie and provider client factories. The
factories are plain dependencies so tests can override them with clients
backed by httpx.MockTransport.
"""

from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.config import settings
from ridegroups.db.session import get_async_db
from ridegroups.exceptions import NotAuthenticatedError
from ridegroups.features.google import GoogleOAuth
from ridegroups.features.strava import StravaClient
from ridegroups.features.users import SessionRepository, User, UserRepository, UserSession


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_user(
    session_id: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_async_db),
) -> Optional[User]:
    """User bound to the session cookie, or None."""
    if not session_id:
        return None
    session = await SessionRepository(db).get_active(session_id)
    if session is None:
        return None
    return await UserRepository(db).get_by_id(session.user_id)


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """
    Raises:
        NotAuthenticatedError: If there is no valid session
    """
    if user is None:
        raise NotAuthenticatedError()
    return user


def get_strava_client() -> StravaClient:
    return StravaClient()


def get_google_oauth() -> GoogleOAuth:
    return GoogleOAuth()


def set_session_cookie(response: Response, session: UserSession) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.id,
        max_age=settings.session_ttl_days * 24 * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.base_url.startswith("https"),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)


def frontend_redirect(path: str) -> RedirectResponse:
    """Redirect the browser back to the frontend (OAuth callbacks)."""
    return RedirectResponse(url=f"{settings.frontend_url.rstrip('/')}{path}", status_code=302)
