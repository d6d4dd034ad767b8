"""
Strava activity import.

Sync Flow:
1. Require a stored Strava access token (no network call otherwise)
2. Fetch one page of activities (page 1, 30 per page)
3. Keep only rides
4. Map units and insert every ride as a new Activity
5. Return the number of rows created

Imports are not deduplicated: running sync twice over the same remote
window stores every ride twice.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.exceptions import NotConnectedError
from ridegroups.features.activities.models import Activity
from ridegroups.features.users.models import User
from ..client import StravaClient
from .activities import is_ride, map_strava_activity
from .config import SyncConfig

logger = logging.getLogger(__name__)


class ActivityImportService:
    """
    Imports Strava rides into local activities.

    Usage:
        service = ActivityImportService(db, StravaClient())
        created = await service.sync_activities(user)
        await db.commit()
    """

    def __init__(self, db: AsyncSession, client: StravaClient):
        self.db = db
        self.client = client

    async def sync_activities(
        self,
        user: User,
        page: int = SyncConfig.DEFAULT_PAGE,
        per_page: int = SyncConfig.ACTIVITIES_PER_PAGE
    ) -> int:
        """
        Import one page of the user's Strava activities.

        Returns:
            Number of Activity rows created

        Raises:
            NotConnectedError: If the user has no Strava access token
            UpstreamAuthError: If Strava rejects the token (not refreshed here)
        """
        if not user.strava_access_token:
            raise NotConnectedError()

        remote = await self.client.get_activities(
            user.strava_access_token, page=page, per_page=per_page
        )
        rides = [data for data in remote if is_ride(data)]

        for data in rides:
            self.db.add(Activity(**map_strava_activity(user.id, data)))
        await self.db.flush()

        logger.info(
            f"Strava sync for user {user.id}: "
            f"{len(rides)} rides imported of {len(remote)} activities"
        )
        return len(rides)
