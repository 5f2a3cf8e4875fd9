"""
db/config.py

Locates the PostgreSQL database holding ``detected_droppings``.

The API process, the ``monthly_health_report`` CLI and Alembic all resolve
the detection store through :func:`resolve_database_url`, so a deployment
only has to set one of the variables below:

    DATABASE_URL          explicit override, always wins
    CLOUD_DATABASE_URL    used when ENVIRONMENT is prod/production/staging/cloud
    LOCAL_DATABASE_URL    developer database

Values may also come from ``.env`` / ``.env.local`` next to the project
root; variables already set in the process are never overwritten.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

_CLOUD_LIKE_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})
_ENV_FILES = (".env", ".env.local")
_PSYCOPG_SCHEME = "postgresql+psycopg://"


def load_env_files() -> None:
    """
    Copy KEY=VALUE pairs from the project's env files into ``os.environ``.

    Blank lines, ``#`` comments and lines without ``=`` are ignored; one
    level of surrounding quotes is stripped from values.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILES:
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Point ``postgres://`` and ``postgresql://`` URLs at the psycopg 3 driver.

    Hosted providers usually hand out the bare scheme, which SQLAlchemy
    would map to psycopg2. URLs that already name a driver are unchanged.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return _PSYCOPG_SCHEME + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    """
    Return the detection store URL, normalised for psycopg.

    Raises
    ------
    RuntimeError
        None of the database variables is set.
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url:
        logger.debug("Detection store URL taken from DATABASE_URL")
        return normalize_postgres_url(direct_url)

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    cloud_url = os.getenv("CLOUD_DATABASE_URL")
    if environment in _CLOUD_LIKE_ENVIRONMENTS and cloud_url:
        logger.debug("Detection store URL taken from CLOUD_DATABASE_URL (ENVIRONMENT=%s)", environment)
        return normalize_postgres_url(cloud_url)

    local_url = os.getenv("LOCAL_DATABASE_URL")
    if local_url:
        logger.debug("Detection store URL taken from LOCAL_DATABASE_URL")
        return normalize_postgres_url(local_url)

    raise RuntimeError(
        "No detection store configured. Set DATABASE_URL, or "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
