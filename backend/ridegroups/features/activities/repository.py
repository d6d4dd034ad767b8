"""
Activity repository.
"""

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.shared.repository import BaseRepository
from .models import Activity


class ActivityRepository(BaseRepository[Activity]):
    """Repository for activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_user_activities(self, user_id: str) -> list[Activity]:
        """
        Get all activities of a user.

        Returns:
            Activities ordered by start time (newest first)
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(desc(Activity.start_time))
        )
        return list(result.scalars().all())
