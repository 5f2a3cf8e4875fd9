"""
db/base.py

Declarative base shared by every SQLAlchemy model.
"""

from typing import Any

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class so Alembic sees them.
    """

    type_annotation_map: dict[type, Any] = {}
