from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    service: str


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any database connection is initialised and raises
    RuntimeError listing every problem so the operator can fix them in one
    restart cycle.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not (database_url or cloud_database_url or local_database_url):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    ttl_raw = os.getenv("MONTHLY_HEALTH_CACHE_TTL_SECONDS", "").strip()
    if ttl_raw and not ttl_raw.lstrip("-").isdigit():
        errors.append(
            f"MONTHLY_HEALTH_CACHE_TTL_SECONDS='{ttl_raw}' is not an integer."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed — missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.
    Missing tables abort startup; migrations are never run automatically.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch — %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot; drop cached views on exit."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")

    from app.services.monthly_health_service import get_monthly_health_service

    try:
        yield
    finally:
        get_monthly_health_service().invalidate()
        logging.getLogger(__name__).info("Monthly health view cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Flock Health API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import monthly_health_router

    application.include_router(monthly_health_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", service="flock-health")

    return application


app = create_app()
