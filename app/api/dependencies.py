"""
app/api/dependencies.py

Shared FastAPI dependencies for request context.
"""

from __future__ import annotations

from fastapi import Request

from app.config import get_monthly_health_settings


def get_request_user_id(request: Request) -> str | None:
    """
    Read the calling user's id from the configured identity header.

    A missing or blank header yields ``None``; downstream services treat
    that as "no data" rather than rejecting the request.
    """

    header_name = get_monthly_health_settings().user_header
    raw = request.headers.get(header_name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped if stripped else None
