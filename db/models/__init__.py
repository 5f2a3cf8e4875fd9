"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.detected_dropping import DetectedDropping

__all__ = [
    "DetectedDropping",
]
