"""
app/services/monthly_health_service.py

Monthly flock health controller.

Wires DetectionRepository → month enumeration → month aggregation:

    DetectionRepository.fetch   – the only I/O, issued once per view
    available_months            – months with at least one record
    order_months                – calendar order for the selector
    aggregate_month             – per-month category totals

A :class:`MonthlyHealthView` holds the fetched snapshot, so switching the
selected month recomputes the distribution from memory instead of
querying the store again.

Failure contract
----------------
- Missing user id (AuthenticationError) → empty view, INFO log
- Store failure (StoreError)            → empty view, ERROR log
- Malformed single record               → skipped inside the aggregation
                                          layer, WARNING log

The presentation layer therefore always receives a renderable (possibly
empty) result and never an exception from this module.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import tzinfo
from functools import cached_property, lru_cache

from app.config import get_monthly_health_settings
from db.repositories.errors import AuthenticationError, StoreError
from detection.aggregation import (
    AggregatedDistribution,
    ChartSlice,
    aggregate_month,
    to_chart_slices,
)
from detection.months import available_months, order_months
from detection.records import DetectionRecord

logger = logging.getLogger(__name__)

RecordFetcher = Callable[[str | None], Sequence[DetectionRecord]]


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthlySummary:
    """Everything the chart and the month selector need for one render."""

    user_id: str | None
    months: tuple[str, ...]
    selected_month: str | None
    distribution: AggregatedDistribution
    slices: tuple[ChartSlice, ...]

    @property
    def has_data(self) -> bool:
        return bool(self.distribution)


@dataclass(frozen=True)
class MonthlyHealthView:
    """
    Immutable snapshot of one user's detection records.

    ``months`` and ``default_month`` are derived once from the snapshot;
    :meth:`distribution` is recomputed on every call and is pure.
    """

    user_id: str | None
    records: tuple[DetectionRecord, ...] = ()
    tz: tzinfo | None = field(default=None, compare=False)

    @cached_property
    def available(self) -> frozenset[str]:
        return available_months(self.records, tz=self.tz)

    @cached_property
    def months(self) -> tuple[str, ...]:
        return tuple(order_months(self.available))

    @property
    def default_month(self) -> str | None:
        """Earliest month with data, or ``None`` for an empty view."""
        return self.months[0] if self.months else None

    @property
    def is_empty(self) -> bool:
        return not self.records

    def distribution(self, month_name: str) -> AggregatedDistribution:
        return aggregate_month(self.records, month_name, tz=self.tz)

    def summary(self, month_name: str | None = None) -> MonthlySummary:
        """
        Build the render payload for *month_name*.

        When *month_name* is ``None`` the default (earliest) month is used.
        An unknown or data-less month yields an empty distribution.
        """
        selected = month_name if month_name is not None else self.default_month
        distribution = self.distribution(selected) if selected is not None else ()
        return MonthlySummary(
            user_id=self.user_id,
            months=self.months,
            selected_month=selected,
            distribution=distribution,
            slices=tuple(to_chart_slices(distribution)),
        )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class MonthlyHealthService:
    """
    Loads :class:`MonthlyHealthView` snapshots for users.

    Parameters
    ----------
    fetch:
        Record fetcher, normally :func:`fetch_with_new_session`.
    tz:
        Display timezone handed to every view.
    cache_ttl_seconds:
        How long a successfully loaded view is reused for the same user.
        ``0`` disables caching.
    clock:
        Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        fetch: RecordFetcher,
        *,
        tz: tzinfo | None = None,
        cache_ttl_seconds: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._tz = tz
        self._ttl = max(0, cache_ttl_seconds)
        self._clock = clock
        self._cache: dict[str, tuple[float, MonthlyHealthView]] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str | None) -> MonthlyHealthView:
        """
        Fetch (or reuse) the record snapshot for *user_id*.

        Never raises for missing users or store failures; an empty view is
        returned instead.
        """
        owner = (user_id or "").strip() or None

        cached = self._cached(owner)
        if cached is not None:
            return cached

        try:
            records = tuple(self._fetch(owner))
        except AuthenticationError as exc:
            logger.info("No user for monthly health view: %s", exc)
            return MonthlyHealthView(user_id=owner, tz=self._tz)
        except StoreError:
            logger.exception("Detection fetch failed user=%r; serving empty view", owner)
            return MonthlyHealthView(user_id=owner, tz=self._tz)

        view = MonthlyHealthView(user_id=owner, records=records, tz=self._tz)
        logger.info("Loaded monthly health view user=%r records=%d", owner, len(records))
        self._store(owner, view)
        return view

    def invalidate(self, user_id: str | None = None) -> None:
        """Drop the cached view for *user_id*, or every cached view."""
        with self._lock:
            if user_id is None:
                self._cache.clear()
            else:
                self._cache.pop(user_id.strip(), None)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _cached(self, owner: str | None) -> MonthlyHealthView | None:
        if self._ttl == 0 or owner is None:
            return None
        with self._lock:
            entry = self._cache.get(owner)
            if entry is None:
                return None
            loaded_at, view = entry
            if self._clock() - loaded_at >= self._ttl:
                del self._cache[owner]
                return None
            return view

    def _store(self, owner: str | None, view: MonthlyHealthView) -> None:
        if self._ttl == 0 or owner is None:
            return
        with self._lock:
            now = self._clock()
            expired = [
                key for key, (loaded_at, _) in self._cache.items()
                if now - loaded_at >= self._ttl
            ]
            for key in expired:
                del self._cache[key]
            if expired:
                logger.debug("Evicted %d expired monthly health view(s)", len(expired))
            self._cache[owner] = (now, view)

    @property
    def cached_users(self) -> int:
        """Number of views currently held in the cache."""
        with self._lock:
            return len(self._cache)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def fetch_with_new_session(user_id: str | None) -> list[DetectionRecord]:
    """
    Fetch records through a short-lived session.

    The service outlives any single request, so it cannot hold a
    request-scoped session.
    """
    from db.repositories.detection_repository import DetectionRepository
    from db.session import read_session

    with read_session() as db:
        return DetectionRepository(db).fetch(user_id)


@lru_cache(maxsize=1)
def get_monthly_health_service() -> MonthlyHealthService:
    """
    Build and cache the monthly health service with env-driven settings.
    """
    settings = get_monthly_health_settings()
    return MonthlyHealthService(
        fetch_with_new_session,
        tz=settings.display_timezone,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
