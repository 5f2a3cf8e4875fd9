"""
tests/test_detection_repository.py

Pytest unit tests for DetectionRepository.

The SQLAlchemy session is mocked; no database connection is opened.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from db.models.detected_dropping import DetectedDropping
from db.repositories import AuthenticationError, DetectionRepository, StoreError
from db.repositories.errors import DetectionRepositoryError
from detection.records import DetectionRecord


def _session_returning(rows: list[DetectedDropping]) -> MagicMock:
    session = MagicMock()
    session.scalars.return_value.all.return_value = rows
    return session


def _row(user_id: str, when: datetime, counts: object) -> DetectedDropping:
    return DetectedDropping(user_id=user_id, date=when, detections_count=counts)


# ---------------------------------------------------------------------------
# Successful fetch
# ---------------------------------------------------------------------------


class TestFetch:
    def test_rows_become_detection_records(self) -> None:
        when = datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)
        session = _session_returning([_row("farm-1", when, {"Healthy": 3, "NCD-like": 1})])

        records = DetectionRepository(session).fetch("farm-1")

        assert records == [
            DetectionRecord(user_id="farm-1", timestamp=when, counts={"Healthy": 3, "NCD-like": 1})
        ]

    def test_query_filters_on_owner_only(self) -> None:
        session = _session_returning([])

        DetectionRepository(session).fetch("  farm-1  ")

        stmt = session.scalars.call_args.args[0]
        compiled = stmt.compile(dialect=postgresql.dialect())
        assert list(compiled.params.values()) == ["farm-1"]
        assert "detected_droppings.user_id" in str(compiled)

    def test_no_rows_returns_empty_list(self) -> None:
        assert DetectionRepository(_session_returning([])).fetch("farm-1") == []

    def test_non_mapping_counts_become_empty(self) -> None:
        when = datetime(2024, 3, 5, tzinfo=timezone.utc)
        session = _session_returning([_row("farm-1", when, None), _row("farm-1", when, [1, 2])])

        records = DetectionRepository(session).fetch("farm-1")

        assert [dict(r.counts) for r in records] == [{}, {}]

    def test_never_commits(self) -> None:
        session = _session_returning([])
        DetectionRepository(session).fetch("farm-1")
        session.commit.assert_not_called()
        session.rollback.assert_not_called()


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFetchFailures:
    @pytest.mark.parametrize("user_id", [None, "", "   "])
    def test_missing_user_raises_authentication_error(self, user_id: str | None) -> None:
        session = _session_returning([])
        with pytest.raises(AuthenticationError):
            DetectionRepository(session).fetch(user_id)
        session.scalars.assert_not_called()

    def test_query_failure_raises_store_error(self) -> None:
        session = MagicMock()
        cause = OperationalError("SELECT 1", {}, Exception("connection reset"))
        session.scalars.side_effect = cause

        with pytest.raises(StoreError) as exc_info:
            DetectionRepository(session).fetch("farm-1")

        assert exc_info.value.__cause__ is cause

    def test_errors_share_a_base_class(self) -> None:
        assert issubclass(AuthenticationError, DetectionRepositoryError)
        assert issubclass(StoreError, DetectionRepositoryError)
