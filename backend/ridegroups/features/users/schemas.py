"""
User schemas.

Pydantic models for user operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Local login request. The password is not verified."""

    email: str = Field(..., min_length=3)
    password: str = ""


class SignupRequest(BaseModel):
    """Local signup request."""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=1, max_length=200)


class UserResponse(BaseModel):
    """User response. Tokens are never exposed."""

    id: str
    username: Optional[str]
    email: str
    name: str
    avatar: Optional[str]
    provider: str
    strava_id: Optional[int]
    strava_connected: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response of login/signup/demo endpoints."""

    user: UserResponse
    created: bool
