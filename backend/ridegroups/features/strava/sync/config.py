"""
Strava sync configuration constants.
"""


class SyncConfig:
    """Configuration for sync behavior."""

    # Page requested from /athlete/activities on every sync
    DEFAULT_PAGE = 1

    # How many activities to fetch per API call
    ACTIVITIES_PER_PAGE = 30

    # Only this Strava type is imported; everything else is dropped
    IMPORTED_STRAVA_TYPE = "Ride"

    # Local activity_type given to imported rides
    LOCAL_ACTIVITY_TYPE = "ride"
