"""
Declarative base shared by all feature models.
"""

import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Primary key generator for string UUID columns."""
    return str(uuid.uuid4())
