"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from db.config import load_env_files

logger = logging.getLogger(__name__)

DEFAULT_USER_HEADER = "X-User-ID"
DEFAULT_CACHE_TTL_SECONDS = 300


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _resolve_timezone(name: str | None) -> tzinfo | None:
    if name is None:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown MONTHLY_HEALTH_TIMEZONE %r; using stored timestamps as-is", name)
        return None


@dataclass(frozen=True)
class MonthlyHealthSettings:
    """
    Runtime settings for the monthly health distribution endpoints.

    ``display_timezone`` decides which month a timezone-aware detection
    falls into; ``None`` keeps the stored offset.
    """

    user_header: str = DEFAULT_USER_HEADER
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    display_timezone: tzinfo | None = None


@lru_cache(maxsize=1)
def get_monthly_health_settings() -> MonthlyHealthSettings:
    """
    Return cached monthly health settings from environment variables.
    """

    return MonthlyHealthSettings(
        user_header=_get_str_env("MONTHLY_HEALTH_USER_HEADER", DEFAULT_USER_HEADER),
        cache_ttl_seconds=max(0, _get_int_env("MONTHLY_HEALTH_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)),
        display_timezone=_resolve_timezone(_get_optional_str_env("MONTHLY_HEALTH_TIMEZONE")),
    )
