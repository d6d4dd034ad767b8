"""
Activity model.

Stores rides entered manually or imported from Strava.
"""

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from ridegroups.models.base import Base, new_id
from ridegroups.shared.units import utcnow


class Activity(Base):
    """
    A single ride.

    Units:
    - distance, elevation_gain: meters
    - duration: seconds
    - average_speed, max_speed: km/h * 10 (fixed point)
    """

    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    distance = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    elevation_gain = Column(Integer, default=0)
    average_speed = Column(Integer, nullable=False)
    max_speed = Column(Integer, nullable=True)
    activity_type = Column(String(50), nullable=False, default="ride")

    start_time = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User")

    def __repr__(self):
        return f"<Activity {self.id} {self.title!r} {self.distance}m>"
