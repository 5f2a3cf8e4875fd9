"""
detection/records.py

Read-only detection record as handed to the aggregation layer.

Records are produced by :class:`db.repositories.detection_repository.DetectionRepository`
(or built directly in tests). Nothing in this module performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Mapping, Union

from detection.categories import Category, category_for_key

Timestamp = Union[datetime, date, str]

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
)


class DataFormatError(ValueError):
    """
    Raised when a single record cannot be interpreted.

    Callers catch it per record and skip the offending row; it must never
    abort an aggregation over the remaining records.
    """


@dataclass(frozen=True)
class DetectionRecord:
    """
    One stored observation: a user, a date and per-category incident counts.

    ``counts`` is keyed by detector storage key (``"Salmonella-like"``,
    ``"NCD-like"``, ...). It is sparse; a missing key means zero. Keys that
    are not one of the four recognised categories are carried but ignored.
    """

    user_id: str
    timestamp: Timestamp
    counts: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts or {})))

    def count_for(self, category: Category) -> int:
        """
        Return the non-negative integer count stored for *category*.

        Raises
        ------
        DataFormatError
            The stored value is not a non-negative integer.
        """

        raw = self.counts.get(category.storage_key)
        if raw is None:
            return 0
        if isinstance(raw, bool):
            raise DataFormatError(f"Count for {category.storage_key!r} is a boolean: {raw!r}")
        if isinstance(raw, float):
            if not raw.is_integer():
                raise DataFormatError(f"Count for {category.storage_key!r} is not whole: {raw!r}")
            raw = int(raw)
        if not isinstance(raw, int):
            raise DataFormatError(f"Count for {category.storage_key!r} is not an integer: {raw!r}")
        if raw < 0:
            raise DataFormatError(f"Count for {category.storage_key!r} is negative: {raw}")
        return raw

    def category_counts(self) -> dict[Category, int]:
        """
        Return validated counts for the recognised categories present in
        ``counts``. Unknown detector keys are dropped without validating
        their values.

        Raises
        ------
        DataFormatError
            A recognised category holds a malformed count.
        """

        result: dict[Category, int] = {}
        for key in self.counts:
            category = category_for_key(key)
            if category is None:
                continue
            result[category] = self.count_for(category)
        return result


def parse_timestamp(value: Any) -> datetime | date:
    """
    Resolve a stored timestamp into a ``datetime`` or ``date``.

    Strings are tried as ISO-8601 first (a trailing ``Z`` is accepted), then
    against :data:`TIMESTAMP_FORMATS`.

    Raises
    ------
    DataFormatError
        The value is neither a temporal value nor a parseable string.
    """

    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str):
        raise DataFormatError(f"Unsupported timestamp type: {type(value).__name__}")

    raw = value.strip()
    if not raw:
        raise DataFormatError("Timestamp is blank.")

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue

    raise DataFormatError(f"Invalid date/time format: {raw!r}")
