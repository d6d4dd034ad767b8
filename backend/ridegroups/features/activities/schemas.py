"""
Activity schemas.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityCreate(BaseModel):
    """Manual activity entry. Speeds are km/h * 10."""

    title: str = Field(..., min_length=1, max_length=255)
    distance: int = Field(..., ge=0, description="meters")
    duration: int = Field(..., ge=0, description="seconds")
    elevation_gain: int = Field(default=0, ge=0, description="meters")
    average_speed: int = Field(..., ge=0, description="km/h * 10")
    max_speed: Optional[int] = Field(default=None, ge=0, description="km/h * 10")
    activity_type: str = "ride"
    start_time: datetime

    @field_validator("start_time")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Stored timestamps are naive UTC."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class ActivityResponse(BaseModel):
    id: str
    user_id: str
    title: str
    distance: int
    duration: int
    elevation_gain: Optional[int]
    average_speed: int
    max_speed: Optional[int]
    activity_type: str
    start_time: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WeeklyPoint(BaseModel):
    """One bar of the weekly chart."""

    week: str
    distance: float  # km
    speed: float  # km/h


class StatsResponse(BaseModel):
    weekly_distance: float  # km
    avg_speed: float  # km/h
    elevation: int  # m
    weekly_data: list[WeeklyPoint]
