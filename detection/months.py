"""
detection/months.py

Calendar-month helpers: resolving a record to its month bucket, listing the
months a user has data for, and putting month names in calendar order.

Month buckets are long English month names ("January" ... "December").
Grouping compares them by string equality; display orders them by their
position in :data:`CANONICAL_MONTHS`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo
from typing import Any, Final

from detection.records import DataFormatError, DetectionRecord, parse_timestamp

logger = logging.getLogger(__name__)

CANONICAL_MONTHS: Final[tuple[str, ...]] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_POSITION: Final[dict[str, int]] = {name: idx for idx, name in enumerate(CANONICAL_MONTHS)}


def is_month_name(value: str) -> bool:
    return value in _MONTH_POSITION


def resolve_month(timestamp: Any, tz: tzinfo | None = None) -> str:
    """
    Return the long month name of *timestamp*.

    Timezone-aware datetimes are converted to *tz* first when one is given,
    so that a detection logged just before midnight UTC lands in the month
    the farm actually saw it. Naive datetimes and plain dates are used as-is.

    Raises
    ------
    DataFormatError
        The timestamp cannot be resolved to a calendar date.
    """

    value = parse_timestamp(timestamp)
    if isinstance(value, datetime) and value.tzinfo is not None and tz is not None:
        value = value.astimezone(tz)
    return month_of(value)


def record_month(record: DetectionRecord, tz: tzinfo | None = None) -> str:
    return resolve_month(record.timestamp, tz)


def available_months(
    records: Iterable[DetectionRecord],
    *,
    tz: tzinfo | None = None,
) -> frozenset[str]:
    """
    Return the set of months that contain at least one record.

    Presence is enough: a record whose counts are all zero still makes its
    month available. Records with an unreadable timestamp are skipped.
    """

    months: set[str] = set()
    for record in records:
        try:
            months.add(record_month(record, tz))
        except DataFormatError as exc:
            logger.warning(
                "Skipping detection record user=%r: %s", record.user_id, exc,
            )
    return frozenset(months)


def order_months(month_names: Iterable[str]) -> list[str]:
    """
    Sort *month_names* into calendar order (January first).

    Raises
    ------
    ValueError
        A name is not one of :data:`CANONICAL_MONTHS`.
    """

    names = list(month_names)
    unknown = sorted({name for name in names if name not in _MONTH_POSITION})
    if unknown:
        raise ValueError(f"Unknown month name(s): {', '.join(unknown)}")
    return sorted(names, key=_MONTH_POSITION.__getitem__)


def month_of(day: date) -> str:
    """Long month name for a calendar *day*."""
    return CANONICAL_MONTHS[day.month - 1]
