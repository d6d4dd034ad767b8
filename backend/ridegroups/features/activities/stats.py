"""Weekly statistics over stored activities."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.shared.units import meters_to_km, round_1, scaled_kmh_to_kmh, utcnow
from .models import Activity
from .repository import ActivityRepository
from .schemas import StatsResponse, WeeklyPoint

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)
MONTH = timedelta(days=30)
CHART_WEEKS = 4


def compute_stats(activities: Sequence[Activity], now: datetime) -> StatsResponse:
    """Summarise activities for the dashboard.

    "This week" is everything starting at or after now - 7 days.
    weekly_data holds CHART_WEEKS non-overlapping 7-day windows ending at
    now - i*7 days, oldest first.

    Order of the input does not matter. No activities -> all zeros.
    """
    weekly = [a for a in activities if a.start_time >= now - WEEK]
    monthly = [a for a in activities if a.start_time >= now - MONTH]
    logger.debug(
        f"Stats window: {len(weekly)} weekly, {len(monthly)} monthly "
        f"of {len(activities)} activities"
    )

    weekly_data = []
    for i in range(CHART_WEEKS - 1, -1, -1):
        week_start = now - (i + 1) * WEEK
        week_end = now - i * WEEK
        in_week = [a for a in activities if week_start <= a.start_time < week_end]
        weekly_data.append(WeeklyPoint(
            week=f"Week {i + 1}",
            distance=round_1(_total_km(in_week)),
            speed=round_1(_mean_speed_kmh(in_week)),
        ))

    return StatsResponse(
        weekly_distance=round_1(_total_km(weekly)),
        avg_speed=round_1(_mean_speed_kmh(weekly)),
        elevation=sum(a.elevation_gain or 0 for a in weekly),
        weekly_data=weekly_data,
    )


def _total_km(activities: Sequence[Activity]) -> float:
    return meters_to_km(sum(a.distance for a in activities))


def _mean_speed_kmh(activities: Sequence[Activity]) -> float:
    if not activities:
        return 0.0
    mean_scaled = sum(a.average_speed for a in activities) / len(activities)
    return scaled_kmh_to_kmh(mean_scaled)


class StatsService:
    """Loads a user's activities and computes their stats."""

    def __init__(self, db: AsyncSession):
        self.activities = ActivityRepository(db)

    async def get_user_stats(self, user_id: str, now: datetime | None = None) -> StatsResponse:
        activities = await self.activities.get_user_activities(user_id)
        return compute_stats(activities, now or utcnow())
