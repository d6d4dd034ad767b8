"""
Strava activity mapping.

Converts raw Strava activity summaries into local Activity field values.
"""

from ridegroups.shared.units import mps_to_scaled_kmh, parse_provider_timestamp, round_half_up
from .config import SyncConfig


def is_ride(data: dict) -> bool:
    """True for records of the imported Strava type ("Ride")."""
    return data.get("type") == SyncConfig.IMPORTED_STRAVA_TYPE


def map_strava_activity(user_id: str, data: dict) -> dict:
    """
    Map a Strava activity summary to Activity column values.

    - distance: meters, rounded to the nearest meter
    - duration: moving_time in whole seconds
    - elevation_gain: meters, rounded, 0 when absent
    - average/max speed: m/s -> km/h * 10, rounded
    - start_time: start_date parsed to naive UTC

    Args:
        user_id: Owner of the imported activity
        data: Activity summary from GET /athlete/activities

    Returns:
        Keyword arguments for Activity(...)
    """
    return {
        "user_id": user_id,
        "title": data.get("name") or "Ride",
        "distance": round_half_up(data.get("distance") or 0),
        "duration": int(data.get("moving_time") or 0),
        "elevation_gain": round_half_up(data.get("total_elevation_gain") or 0),
        "average_speed": mps_to_scaled_kmh(data.get("average_speed")),
        "max_speed": mps_to_scaled_kmh(data.get("max_speed")),
        "activity_type": SyncConfig.LOCAL_ACTIVITY_TYPE,
        "start_time": parse_provider_timestamp(data["start_date"]),
    }
