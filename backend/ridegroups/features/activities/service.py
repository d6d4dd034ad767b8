"""
Activity service.

Manual activity entry and lookups. Strava imports live in
ridegroups.features.strava.sync.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.exceptions import NotFoundError
from ridegroups.features.users.models import User
from .models import Activity
from .repository import ActivityRepository
from .schemas import ActivityCreate

logger = logging.getLogger(__name__)


class ActivityService:
    """Create and read activities."""

    def __init__(self, db: AsyncSession):
        self.repo = ActivityRepository(db)

    async def list_for_user(self, user_id: str) -> list[Activity]:
        return await self.repo.get_user_activities(user_id)

    async def get(self, activity_id: str) -> Activity:
        activity = await self.repo.get_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity

    async def create(self, user: User, data: ActivityCreate) -> Activity:
        activity = await self.repo.create(user_id=user.id, **data.model_dump())
        logger.info(f"Activity created: user={user.id} distance={activity.distance}m")
        return activity
