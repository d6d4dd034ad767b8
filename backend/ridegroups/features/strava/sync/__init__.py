"""
Strava sync services.

Provides:
- ActivityImportService: imports Strava rides into local activities
- map_strava_activity / is_ride: unit mapping and type filter
"""

from .service import ActivityImportService
from .activities import is_ride, map_strava_activity
from .config import SyncConfig

__all__ = [
    "ActivityImportService",
    "is_ride",
    "map_strava_activity",
    "SyncConfig",
]
