"""
Database Models

Feature models live in features/<name>/models.py and are registered with
Base.metadata when imported. Use register_models() before create_all or
Alembic autogenerate.
"""

from ridegroups.models.base import Base, new_id


def register_models():
    """Import all feature models so their tables are known to Base.metadata."""
    from ridegroups.features.users.models import User, UserSession  # noqa
    from ridegroups.features.groups.models import Group, GroupMembership, GroupActivity  # noqa
    from ridegroups.features.activities.models import Activity  # noqa
    return Base.metadata


__all__ = ["Base", "new_id", "register_models"]
