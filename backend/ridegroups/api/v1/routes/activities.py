"""
Activity Routes

Endpoints for the user's rides and dashboard statistics:
- /activities - List / manually log rides
- /activities/{id} - Ride detail
- /stats - Weekly distance, speed and elevation
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.api.deps import get_current_user
from ridegroups.db.session import get_async_db
from ridegroups.features.activities import (
    ActivityCreate,
    ActivityResponse,
    ActivityService,
    StatsResponse,
    StatsService,
)
from ridegroups.features.users import User

router = APIRouter()


@router.get("/activities", response_model=list[ActivityResponse])
async def list_activities(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Current user's rides, newest first."""
    return await ActivityService(db).list_for_user(user.id)


@router.post("/activities", response_model=ActivityResponse, status_code=201)
async def create_activity(
    data: ActivityCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    activity = await ActivityService(db).create(user, data)
    await db.commit()
    return activity


@router.get("/activities/{activity_id}", response_model=ActivityResponse)
async def get_activity(activity_id: str, db: AsyncSession = Depends(get_async_db)):
    return await ActivityService(db).get(activity_id)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Dashboard statistics.

    Distance and elevation cover the last 7 days; weekly_data has the last
    4 weeks, oldest first.
    """
    return await StatsService(db).get_user_stats(user.id)
