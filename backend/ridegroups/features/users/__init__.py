"""
User management module.

Usage:
    from ridegroups.features.users import User, UserRepository

Models:
- User: Application user with local/Google/Strava identities
- UserSession: Cookie-bound login session

Repositories:
- UserRepository: Data access for users
- SessionRepository: Data access for sessions
"""

from .models import User, UserSession, AuthProvider
from .schemas import (
    LoginRequest,
    SignupRequest,
    UserResponse,
    AuthResponse,
)
from .repository import UserRepository, SessionRepository

__all__ = [
    # Models
    "User",
    "UserSession",
    "AuthProvider",
    # Schemas
    "LoginRequest",
    "SignupRequest",
    "UserResponse",
    "AuthResponse",
    # Repositories
    "UserRepository",
    "SessionRepository",
]
