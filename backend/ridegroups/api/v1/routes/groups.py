"""
Group Routes

Endpoints for cycling groups:
- /groups - List my groups / create a group
- /groups/{id} - Group detail, update, delete
- /groups/{id}/members - Members with their profiles
- /groups/{id}/join, /groups/{id}/membership - Join / leave
- /groups/{id}/activities - Group feed
- /groups/{id}/rides - Rides of all members
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.api.deps import get_current_user
from ridegroups.db.session import get_async_db
from ridegroups.features.activities import ActivityResponse
from ridegroups.features.groups import (
    FeedEntryCreate,
    FeedEntryResponse,
    GroupCreate,
    GroupResponse,
    GroupService,
    GroupUpdate,
    MemberResponse,
)
from ridegroups.features.users import User

router = APIRouter()


# =============================================================================
# Groups
# =============================================================================

@router.get("", response_model=list[GroupResponse])
async def list_groups(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Groups the current user is a member of."""
    return await GroupService(db).list_user_groups(user.id)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    data: GroupCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a group. The creator becomes its owner member."""
    group = await GroupService(db).create_group(user, data)
    await db.commit()
    return group


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: str, db: AsyncSession = Depends(get_async_db)):
    return await GroupService(db).get_group(group_id)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    data: GroupUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    service = GroupService(db)
    group = await service.update_group(await service.get_group(group_id), user, data)
    await db.commit()
    return group


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a group with its memberships and feed. Owner only."""
    service = GroupService(db)
    await service.delete_group(await service.get_group(group_id), user)
    await db.commit()
    return Response(status_code=204)


# =============================================================================
# Membership
# =============================================================================

@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def get_members(group_id: str, db: AsyncSession = Depends(get_async_db)):
    service = GroupService(db)
    await service.get_group(group_id)
    return await service.get_members(group_id)


@router.post("/{group_id}/join", response_model=MemberResponse, status_code=201)
async def join_group(
    group_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    service = GroupService(db)
    membership = await service.join_group(await service.get_group(group_id), user)
    await db.commit()
    return membership


@router.delete("/{group_id}/membership", status_code=204)
async def leave_group(
    group_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Leave a group. Owners cannot leave their own group."""
    service = GroupService(db)
    await service.leave_group(await service.get_group(group_id), user)
    await db.commit()
    return Response(status_code=204)


# =============================================================================
# Feed and rides
# =============================================================================

@router.get("/{group_id}/activities", response_model=list[FeedEntryResponse])
async def get_feed(group_id: str, db: AsyncSession = Depends(get_async_db)):
    """Group feed, newest first."""
    service = GroupService(db)
    await service.get_group(group_id)
    return await service.get_feed(group_id)


@router.post("/{group_id}/activities", response_model=FeedEntryResponse, status_code=201)
async def post_feed_entry(
    group_id: str,
    data: FeedEntryCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    service = GroupService(db)
    entry = await service.post_feed_entry(
        await service.get_group(group_id), user, data.activity_type, data.message
    )
    await db.commit()
    return entry


@router.get("/{group_id}/rides", response_model=list[ActivityResponse])
async def get_group_rides(group_id: str, db: AsyncSession = Depends(get_async_db)):
    """Rides of all group members, newest first."""
    service = GroupService(db)
    await service.get_group(group_id)
    return await service.get_group_rides(group_id)
