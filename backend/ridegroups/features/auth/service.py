"""
Identity linking service.

Resolves each login or provider callback to exactly one User and binds a
session to it:

    callback -> resolver (merge existing | create new) -> session

Memberships and activities are never touched here.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.config import settings
from ridegroups.features.google.oauth import GoogleProfile
from ridegroups.features.strava.client import StravaAthlete
from ridegroups.features.strava.oauth import StravaTokens
from ridegroups.features.users.models import AuthProvider, User, UserSession
from ridegroups.features.users.repository import SessionRepository
from ridegroups.features.users.schemas import LoginRequest, SignupRequest
from .resolvers import LinkResult, StravaIdentity, get_resolver

logger = logging.getLogger(__name__)


@dataclass
class LinkedSession:
    """A resolved user together with the session bound to it."""

    result: LinkResult
    session: UserSession

    @property
    def user(self) -> User:
        return self.result.user

    @property
    def created(self) -> bool:
        return self.result.created


class IdentityLinkingService:
    """
    Usage:
        service = IdentityLinkingService(db)
        linked = await service.link_strava(tokens, athlete, current_user)
        await db.commit()
        response.set_cookie(settings.session_cookie_name, linked.session.id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.sessions = SessionRepository(db)

    async def login_local(self, data: LoginRequest) -> LinkedSession:
        return await self._link("local_login", data)

    async def signup_local(self, data: SignupRequest) -> LinkedSession:
        """
        Raises:
            DuplicateAccountError: If the email or username is taken
        """
        return await self._link("local_signup", data)

    async def demo_login(self) -> LinkedSession:
        return await self._link("demo")

    async def link_google(self, profile: GoogleProfile) -> LinkedSession:
        """
        Raises:
            MissingEmailError: If the profile carries no email
        """
        return await self._link(AuthProvider.GOOGLE, profile)

    async def link_strava(
        self,
        tokens: StravaTokens,
        athlete: StravaAthlete,
        current_user: Optional[User] = None,
    ) -> LinkedSession:
        identity = StravaIdentity(tokens=tokens, athlete=athlete, current_user=current_user)
        return await self._link(AuthProvider.STRAVA, identity)

    async def bind_session(self, user: User) -> UserSession:
        return await self.sessions.open(user.id, settings.session_ttl_days)

    async def logout(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        closed = await self.sessions.close(session_id)
        if closed:
            logger.info("Session closed")
        return closed

    async def _link(self, kind: str, identity=None) -> LinkedSession:
        result = await get_resolver(kind, self.db).resolve(identity)
        return await self._bind(result)

    async def _bind(self, result: LinkResult) -> LinkedSession:
        session = await self.bind_session(result.user)
        return LinkedSession(result=result, session=session)
