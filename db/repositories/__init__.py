"""
Repository layer exports.
"""

from db.repositories.detection_repository import DetectionRepository
from db.repositories.errors import (
    AuthenticationError,
    DetectionRepositoryError,
    StoreError,
)

__all__ = [
    "DetectionRepository",
    "DetectionRepositoryError",
    "AuthenticationError",
    "StoreError",
]
