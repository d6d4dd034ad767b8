"""
Group service.

Group lifecycle, membership and feed operations. Route handlers commit;
the service only flushes.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.exceptions import AlreadyMemberError, ForbiddenError, NotFoundError
from ridegroups.features.activities.models import Activity
from ridegroups.features.users.models import User
from .models import Group, GroupMembership, GroupActivity, MemberRole, FeedEventType
from .repository import GroupRepository, MembershipRepository, FeedRepository
from .schemas import GroupCreate, GroupUpdate

logger = logging.getLogger(__name__)


class GroupService:
    """
    Groups, memberships and the group feed.

    Usage:
        service = GroupService(db)
        group = await service.create_group(user, GroupCreate(name="Sunday Riders"))
        await db.commit()
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.groups = GroupRepository(db)
        self.memberships = MembershipRepository(db)
        self.feed = FeedRepository(db)

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    async def create_group(self, owner: User, data: GroupCreate) -> Group:
        """Create a group and the owner's membership in one flush."""
        group = Group(
            name=data.name,
            description=data.description,
            visibility=data.visibility.value,
            avatar=data.avatar,
            owner_id=owner.id,
        )
        self.db.add(group)
        await self.db.flush()

        self.db.add(GroupMembership(
            group_id=group.id,
            user_id=owner.id,
            role=MemberRole.OWNER.value,
        ))
        await self.db.flush()
        await self.db.refresh(group)

        logger.info(f"Group created: {group.id} owner={owner.id}")
        return group

    async def get_group(self, group_id: str) -> Group:
        group = await self.groups.get_by_id(group_id)
        if group is None:
            raise NotFoundError("Group", group_id)
        return group

    async def list_user_groups(self, user_id: str) -> list[Group]:
        return await self.groups.get_by_user_id(user_id)

    async def update_group(self, group: Group, user: User, data: GroupUpdate) -> Group:
        self._require_owner(group, user)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("visibility") is not None:
            changes["visibility"] = changes["visibility"].value
        return await self.groups.update(group, **changes)

    async def delete_group(self, group: Group, user: User) -> None:
        self._require_owner(group, user)
        await self.groups.delete_cascade(group)
        logger.info(f"Group deleted: {group.id} by {user.id}")

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    async def get_members(self, group_id: str) -> list[GroupMembership]:
        return await self.memberships.get_members(group_id)

    async def join_group(self, group: Group, user: User) -> GroupMembership:
        """
        Add user as a member and post a "joined" feed entry.

        Raises:
            AlreadyMemberError: If a membership row already exists
        """
        if await self.memberships.get_membership(group.id, user.id) is not None:
            raise AlreadyMemberError()
        try:
            membership = await self.memberships.create(
                group_id=group.id,
                user_id=user.id,
                role=MemberRole.MEMBER.value,
            )
        except IntegrityError as e:
            # concurrent join of the same user
            await self.db.rollback()
            raise AlreadyMemberError() from e

        await self.feed.create(
            group_id=group.id,
            user_id=user.id,
            activity_type=FeedEventType.JOINED_GROUP.value,
            message=f"{user.name} joined {group.name}",
        )
        return membership

    async def leave_group(self, group: Group, user: User) -> None:
        membership = await self.memberships.get_membership(group.id, user.id)
        if membership is None:
            raise NotFoundError("Membership")
        if membership.role == MemberRole.OWNER.value:
            raise ForbiddenError("The owner cannot leave the group")
        await self.memberships.remove(group.id, user.id)

    # -------------------------------------------------------------------------
    # Feed
    # -------------------------------------------------------------------------

    async def get_feed(self, group_id: str) -> list[GroupActivity]:
        return await self.feed.get_feed(group_id)

    async def post_feed_entry(
        self,
        group: Group,
        user: User,
        event_type: FeedEventType,
        message: str,
    ) -> GroupActivity:
        if await self.memberships.get_membership(group.id, user.id) is None:
            raise ForbiddenError("Only members can post to the group feed")
        return await self.feed.create(
            group_id=group.id,
            user_id=user.id,
            activity_type=event_type.value,
            message=message,
        )

    async def get_group_rides(self, group_id: str) -> list[Activity]:
        return await self.groups.get_member_rides(group_id)

    @staticmethod
    def _require_owner(group: Group, user: User) -> None:
        if group.owner_id != user.id:
            raise ForbiddenError("Only the group owner can do this")
