"""
detection/aggregation.py

Monthly category distribution for the flock health chart.

Pure functions over already-fetched :class:`~detection.records.DetectionRecord`
values. No database access and no side effects other than WARNING logs for
records that have to be skipped.

Contract
--------
``aggregate_month(records, month_name)`` returns either

* ``()`` — no data for the month. This covers "no records in the month"
  and "records exist but every category total is zero"; the chart treats
  both the same way.
* exactly four :class:`CategoryTotal` values in display order
  (Healthy, Salmonella, Newcastle, Coccidiosis), zero totals included.

A record with an unreadable timestamp or a malformed count is skipped on
its own; the remaining records are still aggregated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import tzinfo
from decimal import ROUND_HALF_UP, Decimal

from detection.categories import DISPLAY_ORDER, category_for_label
from detection.months import is_month_name, record_month
from detection.records import DataFormatError, DetectionRecord

logger = logging.getLogger(__name__)

AggregatedDistribution = tuple["CategoryTotal", ...]


@dataclass(frozen=True)
class CategoryTotal:
    """Summed detections for one category in one month."""

    label: str
    total: int


@dataclass(frozen=True)
class ChartSlice:
    """
    One pie slice ready for the renderer.

    ``share`` is the whole-number percentage of the month total, rounded
    half up. Zero-value slices carry a share of 0 so the renderer can hide
    their label.
    """

    label: str
    value: int
    share: int
    color: str


def _record_totals(record: DetectionRecord) -> tuple[int, ...]:
    counts = record.category_counts()
    return tuple(counts.get(category, 0) for category in DISPLAY_ORDER)


def aggregate_month(
    records: Iterable[DetectionRecord],
    month_name: str,
    *,
    tz: tzinfo | None = None,
) -> AggregatedDistribution:
    """
    Sum the four category counters over records falling in *month_name*.

    Parameters
    ----------
    records:
        Fetched records for one user, in any order.
    month_name:
        Long English month name. Anything else matches nothing.
    tz:
        Display timezone used to place timezone-aware timestamps in a month.

    Returns
    -------
    AggregatedDistribution
        ``()`` when there is no data, otherwise four totals in display order.
    """

    if not is_month_name(month_name):
        return ()

    totals = [0] * len(DISPLAY_ORDER)
    matched = 0
    for record in records:
        try:
            if record_month(record, tz) != month_name:
                continue
            record_totals = _record_totals(record)
        except DataFormatError as exc:
            logger.warning(
                "Skipping detection record user=%r month=%s: %s",
                record.user_id, month_name, exc,
            )
            continue

        matched += 1
        for idx, value in enumerate(record_totals):
            totals[idx] += value

    if not any(totals):
        logger.debug("aggregate_month month=%s matched=%d → no data", month_name, matched)
        return ()

    logger.debug("aggregate_month month=%s matched=%d totals=%s", month_name, matched, totals)
    return tuple(
        CategoryTotal(label=category.label, total=total)
        for category, total in zip(DISPLAY_ORDER, totals)
    )


def to_chart_slices(distribution: Sequence[CategoryTotal]) -> list[ChartSlice]:
    """
    Attach percentage shares and colours to a non-empty distribution.

    An empty distribution yields an empty list.
    """

    grand_total = sum(item.total for item in distribution)
    if grand_total == 0:
        return []

    slices: list[ChartSlice] = []
    for item in distribution:
        category = category_for_label(item.label)
        if category is None:
            raise ValueError(f"Unknown category label: {item.label!r}")
        share = (Decimal(item.total) * 100 / Decimal(grand_total)).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        slices.append(
            ChartSlice(
                label=item.label,
                value=item.total,
                share=int(share),
                color=category.color,
            )
        )
    return slices
