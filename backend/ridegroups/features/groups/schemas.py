"""
Group schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ridegroups.features.users.schemas import UserResponse
from .models import GroupVisibility, FeedEventType


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    visibility: GroupVisibility = GroupVisibility.PUBLIC
    avatar: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    visibility: Optional[GroupVisibility] = None
    avatar: Optional[str] = None

    @field_validator("name", "visibility")
    @classmethod
    def not_null(cls, v):
        # May be omitted, but the columns are NOT NULL
        if v is None:
            raise ValueError("may not be null")
        return v


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    visibility: str
    owner_id: str
    avatar: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: str
    joined_at: datetime
    user: UserResponse

    model_config = ConfigDict(from_attributes=True)


class FeedEntryCreate(BaseModel):
    activity_type: FeedEventType
    message: str = Field(..., min_length=1, max_length=1000)


class FeedEntryResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    activity_type: str
    message: str
    created_at: datetime
    user: UserResponse

    model_config = ConfigDict(from_attributes=True)
