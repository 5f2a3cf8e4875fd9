"""
Repository-layer exceptions for detection record reads.
"""

from __future__ import annotations


class DetectionRepositoryError(Exception):
    """Base exception for detection repository failures."""


class AuthenticationError(DetectionRepositoryError):
    """Raised when no usable user identifier was supplied for a fetch."""


class StoreError(DetectionRepositoryError):
    """Raised when the store query cannot complete."""
