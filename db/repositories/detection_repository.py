"""
db/repositories/detection_repository.py

Read access to stored detection runs.

The repository never commits or rolls back; the caller owns the session
lifecycle. Rows are returned as immutable
:class:`~detection.records.DetectionRecord` values so the aggregation layer
never touches ORM instances.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.detected_dropping import DetectedDropping
from db.repositories.errors import AuthenticationError, StoreError
from detection.records import DetectionRecord

logger = logging.getLogger(__name__)


class DetectionRepository:
    """
    Fetches every detection record owned by one user.

    Filtering by month happens in memory over the fetched records, so the
    query carries a single ``user_id`` predicate.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch(self, user_id: str | None) -> list[DetectionRecord]:
        """
        Return all detection records whose owner is *user_id*.

        Order is unspecified; callers must not rely on it.

        Raises
        ------
        AuthenticationError
            *user_id* is missing or blank.
        StoreError
            The query failed. The underlying SQLAlchemy error is chained.
        """
        owner = (user_id or "").strip()
        if not owner:
            raise AuthenticationError("No user identifier available for detection fetch.")

        stmt = select(DetectedDropping).where(DetectedDropping.user_id == owner)
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to fetch detection records for user {owner!r}.") from exc

        records = [_to_record(row) for row in rows]
        logger.debug("fetch user=%r → %d records", owner, len(records))
        return records


def _to_record(row: DetectedDropping) -> DetectionRecord:
    counts = row.detections_count if isinstance(row.detections_count, Mapping) else {}
    return DetectionRecord(user_id=row.user_id, timestamp=row.date, counts=counts)
