"""
Activities module.

Usage:
    from ridegroups.features.activities import ActivityService, StatsService

Components:
- Activity: stored ride
- ActivityRepository: data access
- ActivityService: manual entry and lookups
- compute_stats / StatsService: weekly dashboard statistics
"""

from .models import Activity
from .repository import ActivityRepository
from .schemas import ActivityCreate, ActivityResponse, StatsResponse, WeeklyPoint
from .service import ActivityService
from .stats import compute_stats, StatsService

__all__ = [
    "Activity",
    "ActivityRepository",
    "ActivityCreate",
    "ActivityResponse",
    "StatsResponse",
    "WeeklyPoint",
    "ActivityService",
    "compute_stats",
    "StatsService",
]
