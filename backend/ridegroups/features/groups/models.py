"""
Group-related models.

Models:
- Group: Cycling group owned by a user
- GroupMembership: User's role in a group, one row per (group, user)
- GroupActivity: Feed entry in a group ("joined", "ride completed", ...)
"""

from enum import Enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ridegroups.models.base import Base, new_id
from ridegroups.shared.units import utcnow


class GroupVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INVITE_ONLY = "invite_only"


class MemberRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class FeedEventType(str, Enum):
    RIDE_COMPLETED = "ride_completed"
    JOINED_GROUP = "joined_group"
    PERSONAL_RECORD = "personal_record"


class Group(Base):
    """Cycling group."""

    __tablename__ = "groups"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    visibility = Column(String(20), nullable=False, default=GroupVisibility.PUBLIC.value)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    avatar = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    owner = relationship("User")
    memberships = relationship(
        "GroupMembership",
        back_populates="group",
        cascade="all, delete-orphan",
    )
    feed = relationship(
        "GroupActivity",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Group {self.id} ({self.name})>"


class GroupMembership(Base):
    """User membership in a group."""

    __tablename__ = "group_memberships"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_membership"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    group_id = Column(String(36), ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=MemberRole.MEMBER.value)
    joined_at = Column(DateTime, default=utcnow)

    group = relationship("Group", back_populates="memberships")
    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<GroupMembership group={self.group_id} user={self.user_id} role={self.role}>"


class GroupActivity(Base):
    """
    Group feed entry.

    Denormalized event referencing a group and a user; unrelated to the
    Activity (ride) table.
    """

    __tablename__ = "group_activities"

    id = Column(String(36), primary_key=True, default=new_id)
    group_id = Column(String(36), ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    activity_type = Column(String(30), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    group = relationship("Group", back_populates="feed")
    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<GroupActivity {self.activity_type} group={self.group_id}>"
