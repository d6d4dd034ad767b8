"""
Unit conversions for stored activity metrics.

Storage conventions:
- distance and elevation: whole meters
- duration: whole seconds
- speed: km/h multiplied by 10, stored as an integer

Rounding is half-up (2.5 -> 3), not Python's round-half-to-even.
"""

import math
from datetime import datetime, timezone

SPEED_SCALE = 10
MPS_TO_KMH = 3.6


def round_half_up(value: float) -> int:
    """Round to the nearest integer; halves round up."""
    return math.floor(value + 0.5)


def round_1(value: float) -> float:
    """Round to one decimal place, half-up."""
    return math.floor(value * 10 + 0.5) / 10


def mps_to_scaled_kmh(speed_mps: float | None) -> int:
    """
    Convert meters/second to the stored km/h x 10 integer.

    5.0 m/s -> 18.0 km/h -> 180
    """
    return round_half_up((speed_mps or 0) * MPS_TO_KMH * SPEED_SCALE)


def scaled_kmh_to_kmh(scaled: float) -> float:
    """Undo the x10 fixed-point scaling."""
    return scaled / SPEED_SCALE


def meters_to_km(meters: float) -> float:
    return meters / 1000


def parse_provider_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp ("2024-01-15T10:00:00Z") into naive UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def utcnow() -> datetime:
    """Current time as naive UTC, matching what the database stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
