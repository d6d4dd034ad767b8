"""
Group repositories.

Data access layer for Group, GroupMembership and GroupActivity models.
"""

from sqlalchemy import select, desc, delete
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.features.activities.models import Activity
from ridegroups.shared.repository import BaseRepository
from .models import Group, GroupMembership, GroupActivity


class GroupRepository(BaseRepository[Group]):
    """Repository for groups."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Group)

    async def get_by_user_id(self, user_id: str) -> list[Group]:
        """
        Get groups the user is a member of (any role).

        Args:
            user_id: User's ID

        Returns:
            Groups in membership order
        """
        result = await self.db.execute(
            select(Group)
            .join(GroupMembership, GroupMembership.group_id == Group.id)
            .where(GroupMembership.user_id == user_id)
            .order_by(GroupMembership.joined_at)
        )
        return list(result.scalars().all())

    async def get_member_rides(self, group_id: str) -> list[Activity]:
        """
        Get activities of every member of a group.

        Returns:
            Activities ordered by start time (newest first)
        """
        member_ids = (
            select(GroupMembership.user_id)
            .where(GroupMembership.group_id == group_id)
        )
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id.in_(member_ids))
            .order_by(desc(Activity.start_time))
        )
        return list(result.scalars().all())

    async def delete_cascade(self, group: Group) -> None:
        """Delete a group together with its memberships and feed."""
        await self.db.execute(
            delete(GroupMembership).where(GroupMembership.group_id == group.id)
        )
        await self.db.execute(
            delete(GroupActivity).where(GroupActivity.group_id == group.id)
        )
        await self.db.execute(delete(Group).where(Group.id == group.id))
        await self.db.flush()
        self.db.expunge(group)


class MembershipRepository(BaseRepository[GroupMembership]):
    """Repository for group memberships."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, GroupMembership)

    async def get_membership(self, group_id: str, user_id: str) -> GroupMembership | None:
        return await self.get_by(group_id=group_id, user_id=user_id)

    async def get_members(self, group_id: str) -> list[GroupMembership]:
        """Memberships of a group with users loaded, oldest first."""
        result = await self.db.execute(
            select(GroupMembership)
            .where(GroupMembership.group_id == group_id)
            .order_by(GroupMembership.joined_at)
        )
        return list(result.unique().scalars().all())

    async def remove(self, group_id: str, user_id: str) -> bool:
        """
        Delete a membership.

        Returns:
            True if a membership was deleted
        """
        result = await self.db.execute(
            delete(GroupMembership)
            .where(GroupMembership.group_id == group_id)
            .where(GroupMembership.user_id == user_id)
        )
        await self.db.flush()
        return result.rowcount > 0


class FeedRepository(BaseRepository[GroupActivity]):
    """Repository for group feed entries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, GroupActivity)

    async def get_feed(self, group_id: str, limit: int = 50) -> list[GroupActivity]:
        """Feed entries with users loaded, newest first."""
        result = await self.db.execute(
            select(GroupActivity)
            .where(GroupActivity.group_id == group_id)
            .order_by(desc(GroupActivity.created_at))
            .limit(limit)
        )
        return list(result.unique().scalars().all())
