"""
Cycling groups module.

Usage:
    from ridegroups.features.groups import GroupService, GroupCreate
"""

from .models import (
    Group,
    GroupMembership,
    GroupActivity,
    GroupVisibility,
    MemberRole,
    FeedEventType,
)
from .repository import GroupRepository, MembershipRepository, FeedRepository
from .schemas import (
    GroupCreate,
    GroupUpdate,
    GroupResponse,
    MemberResponse,
    FeedEntryCreate,
    FeedEntryResponse,
)
from .service import GroupService

__all__ = [
    # Models
    "Group",
    "GroupMembership",
    "GroupActivity",
    "GroupVisibility",
    "MemberRole",
    "FeedEventType",
    # Repositories
    "GroupRepository",
    "MembershipRepository",
    "FeedRepository",
    # Schemas
    "GroupCreate",
    "GroupUpdate",
    "GroupResponse",
    "MemberResponse",
    "FeedEntryCreate",
    "FeedEntryResponse",
    # Service
    "GroupService",
]
