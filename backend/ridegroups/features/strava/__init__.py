"""
Strava integration module.

Usage:
    from ridegroups.features.strava import StravaClient
    from ridegroups.features.strava.sync import ActivityImportService

Components:
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh)
- StravaClient: API client (athlete, activities)
- ActivityImportService: ride import into local activities
"""

from .oauth import StravaOAuth, StravaTokens
from .client import StravaClient, StravaAthlete

__all__ = [
    "StravaOAuth",
    "StravaTokens",
    "StravaClient",
    "StravaAthlete",
]
