"""
User-related models.

Models:
- User: Application user linked to local, Google and Strava identities
- UserSession: Opaque login session bound to a user
"""

import secrets
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, DateTime, Integer, BigInteger, ForeignKey, Text
from sqlalchemy.orm import relationship

from ridegroups.models.base import Base, new_id
from ridegroups.shared.units import utcnow


class AuthProvider(str, Enum):
    """Provider that last authenticated the user."""
    LOCAL = "local"
    GOOGLE = "google"
    STRAVA = "strava"


class User(Base):
    """
    Application user.

    Email is unique and required. A Strava athlete id maps to at most one
    user, enforced by the unique constraint on strava_id.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(100), unique=True, index=True, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Profile
    name = Column(String(200), nullable=False)
    avatar = Column(Text, nullable=True)

    # Authentication
    provider = Column(String(20), nullable=False, default=AuthProvider.LOCAL.value)
    google_id = Column(String(64), nullable=True, index=True)

    # Strava integration (tokens should be encrypted in production)
    strava_id = Column(BigInteger, unique=True, nullable=True)
    strava_access_token = Column(Text, nullable=True)
    strava_refresh_token = Column(Text, nullable=True)
    strava_token_expiry = Column(Integer, nullable=True)  # Unix timestamp

    # Timestamps
    created_at = Column(DateTime, default=utcnow)

    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def strava_connected(self) -> bool:
        return bool(self.strava_access_token)

    def __repr__(self):
        return f"<User {self.id} ({self.email})>"


def _new_session_id() -> str:
    return secrets.token_urlsafe(32)


class UserSession(Base):
    """
    Login session.

    The id is the opaque value stored in the browser cookie.
    Created on login/signup/demo login/OAuth callback, deleted on logout.
    """

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True, default=_new_session_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def __repr__(self):
        return f"<UserSession user_id={self.user_id}>"
