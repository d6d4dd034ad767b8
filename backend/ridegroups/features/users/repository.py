"""
User repositories.

Data access layer for User and UserSession models.
"""

from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.shared.repository import BaseRepository
from ridegroups.shared.units import utcnow
from .models import User, UserSession


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        return await self.get_by(email=email)

    async def get_by_username(self, username: str) -> User | None:
        return await self.get_by(username=username)

    async def get_by_strava_id(self, strava_id: int) -> User | None:
        """
        Get user by Strava athlete ID.

        Args:
            strava_id: Strava's numeric athlete ID

        Returns:
            User if found, None otherwise
        """
        return await self.get_by(strava_id=strava_id)

    async def unique_username(self, base: str) -> str:
        """
        Return base, or base with the smallest numeric suffix that is free.

        "alice" -> "alice", "alice2", "alice3", ...
        """
        base = base or "rider"
        candidate = base
        suffix = 2
        while await self.get_by_username(candidate) is not None:
            candidate = f"{base}{suffix}"
            suffix += 1
        return candidate


class SessionRepository(BaseRepository[UserSession]):
    """Repository for login sessions."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserSession)

    async def open(self, user_id: str, ttl_days: int) -> UserSession:
        """
        Create a new session for user.

        Args:
            user_id: User to bind
            ttl_days: Session lifetime

        Returns:
            Created session; its id is the cookie value
        """
        return await self.create(
            user_id=user_id,
            expires_at=utcnow() + timedelta(days=ttl_days),
        )

    async def get_active(self, session_id: str) -> UserSession | None:
        """Get session if it exists and has not expired."""
        session = await self.get_by_id(session_id)
        if session is None or session.is_expired():
            return None
        return session

    async def close(self, session_id: str) -> bool:
        """
        Delete a session (logout).

        Returns:
            True if a session was deleted
        """
        result = await self.db.execute(
            delete(UserSession).where(UserSession.id == session_id)
        )
        await self.db.flush()
        return result.rowcount > 0
