"""
tests/test_aggregation.py

Pytest unit tests for the monthly category aggregation.

All tests are pure Python — no database, no I/O, in-memory records only.

Coverage
--------
- Single-record month distribution
- All-zero month collapses to the no-data marker
- Sparse counts summed across records
- Empty record set
- Unknown month names and unknown category keys
- Malformed records skipped without aborting the aggregation
- String and timezone-aware timestamps
- Output shape, ordering and idempotence
- Chart slice shares and colours
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from detection.aggregation import CategoryTotal, ChartSlice, aggregate_month, to_chart_slices
from detection.categories import Category
from detection.records import DetectionRecord

LABELS = ["Healthy", "Salmonella", "Newcastle", "Coccidiosis"]


def _record(timestamp: object, **counts: int) -> DetectionRecord:
    return DetectionRecord(user_id="farm-1", timestamp=timestamp, counts=counts)


def _raw(timestamp: object, counts: dict) -> DetectionRecord:
    return DetectionRecord(user_id="farm-1", timestamp=timestamp, counts=counts)


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_single_healthy_record(self) -> None:
        records = [_record(date(2024, 3, 5), Healthy=3)]
        assert aggregate_month(records, "March") == (
            CategoryTotal("Healthy", 3),
            CategoryTotal("Salmonella", 0),
            CategoryTotal("Newcastle", 0),
            CategoryTotal("Coccidiosis", 0),
        )

    def test_all_zero_counts_mean_no_data(self) -> None:
        records = [_record(date(2024, 3, 5), Healthy=0)]
        assert aggregate_month(records, "March") == ()

    def test_sparse_counts_are_summed_per_category(self) -> None:
        records = [
            _raw(date(2024, 1, 3), {"Salmonella-like": 2}),
            _raw(date(2024, 1, 20), {"NCD-like": 1}),
        ]
        assert aggregate_month(records, "January") == (
            CategoryTotal("Healthy", 0),
            CategoryTotal("Salmonella", 2),
            CategoryTotal("Newcastle", 1),
            CategoryTotal("Coccidiosis", 0),
        )

    def test_empty_records(self) -> None:
        assert aggregate_month([], "January") == ()


# ---------------------------------------------------------------------------
# Month filtering
# ---------------------------------------------------------------------------


class TestMonthFiltering:
    def test_records_outside_month_are_ignored(self) -> None:
        records = [
            _record(date(2024, 2, 1), Healthy=5),
            _record(date(2024, 3, 1), Healthy=1),
        ]
        result = aggregate_month(records, "March")
        assert result[0] == CategoryTotal("Healthy", 1)

    def test_no_record_in_month_returns_empty(self) -> None:
        records = [_record(date(2024, 2, 1), Healthy=5)]
        assert aggregate_month(records, "August") == ()

    def test_same_month_of_different_years_is_grouped(self) -> None:
        records = [
            _record(date(2023, 5, 1), Healthy=1),
            _record(date(2024, 5, 1), Healthy=2),
        ]
        assert aggregate_month(records, "May")[0].total == 3

    @pytest.mark.parametrize("month", ["Jan", "march", "MARCH", "", "Smarch"])
    def test_non_canonical_month_name_matches_nothing(self, month: str) -> None:
        records = [_record(date(2024, 1, 1), Healthy=1), _record(date(2024, 3, 1), Healthy=1)]
        assert aggregate_month(records, month) == ()

    def test_iso_string_timestamp(self) -> None:
        records = [_record("2024-03-10T08:00:00Z", Healthy=4)]
        assert aggregate_month(records, "March")[0].total == 4

    def test_aware_timestamp_is_placed_in_display_timezone(self) -> None:
        late_utc = datetime(2024, 1, 31, 20, 30, tzinfo=timezone.utc)
        records = [_record(late_utc, Healthy=1)]
        plus_eight = timezone(timedelta(hours=8))

        assert aggregate_month(records, "January") != ()
        assert aggregate_month(records, "February", tz=plus_eight) != ()
        assert aggregate_month(records, "January", tz=plus_eight) == ()


# ---------------------------------------------------------------------------
# Record robustness
# ---------------------------------------------------------------------------


class TestMalformedRecords:
    def test_unknown_category_keys_are_ignored(self) -> None:
        records = [_raw(date(2024, 4, 2), {"Healthy": 1, "Avian-flu-like": 99})]
        result = aggregate_month(records, "April")
        assert [item.total for item in result] == [1, 0, 0, 0]

    def test_only_unknown_keys_means_no_data(self) -> None:
        records = [_raw(date(2024, 4, 2), {"Avian-flu-like": 99})]
        assert aggregate_month(records, "April") == ()

    def test_unparseable_timestamp_skips_only_that_record(self) -> None:
        records = [
            _record("not-a-date", Healthy=10),
            _record(date(2024, 3, 1), Healthy=2),
        ]
        assert aggregate_month(records, "March")[0].total == 2

    def test_negative_count_skips_only_that_record(self) -> None:
        records = [
            _record(date(2024, 3, 1), Healthy=-4),
            _record(date(2024, 3, 2), Healthy=2),
        ]
        assert aggregate_month(records, "March")[0].total == 2

    def test_non_integer_count_skips_record(self) -> None:
        records = [
            _raw(date(2024, 3, 1), {"Healthy": "three"}),
            _raw(date(2024, 3, 2), {"Healthy": 1.5}),
        ]
        assert aggregate_month(records, "March") == ()

    def test_whole_float_count_is_accepted(self) -> None:
        records = [_raw(date(2024, 3, 1), {"Coccidiosis-like": 2.0})]
        assert aggregate_month(records, "March")[3] == CategoryTotal("Coccidiosis", 2)

    def test_large_totals_do_not_wrap(self) -> None:
        big = 2**62
        records = [_record(date(2024, 3, 1), Healthy=big), _record(date(2024, 3, 2), Healthy=big)]
        assert aggregate_month(records, "March")[0].total == 2**63


# ---------------------------------------------------------------------------
# Output contract
# ---------------------------------------------------------------------------


class TestOutputContract:
    def test_result_is_empty_or_four_pairs_in_display_order(self) -> None:
        records = [
            _raw(date(2024, 6, 1), {"Coccidiosis-like": 1}),
            _raw(date(2024, 7, 1), {"Healthy": 0}),
        ]
        for month in ("June", "July", "December"):
            result = aggregate_month(records, month)
            assert result == () or [item.label for item in result] == LABELS
            assert all(item.total >= 0 for item in result)

    def test_zero_totals_are_kept_when_month_has_data(self) -> None:
        result = aggregate_month([_raw(date(2024, 6, 1), {"NCD-like": 7})], "June")
        assert len(result) == 4
        assert [item.total for item in result] == [0, 0, 7, 0]

    def test_is_idempotent(self) -> None:
        records = [
            _raw(date(2024, 9, 1), {"Healthy": 2, "NCD-like": 1}),
            _raw(date(2024, 9, 3), {"Salmonella-like": 4}),
        ]
        assert aggregate_month(records, "September") == aggregate_month(records, "September")

    def test_result_is_immutable(self) -> None:
        result = aggregate_month([_record(date(2024, 9, 1), Healthy=1)], "September")
        assert isinstance(result, tuple)
        with pytest.raises((AttributeError, TypeError)):
            result[0].total = 5  # type: ignore[misc]

    def test_accepts_a_generator(self) -> None:
        records = (_record(date(2024, 10, d), Healthy=1) for d in range(1, 4))
        assert aggregate_month(records, "October")[0].total == 3


# ---------------------------------------------------------------------------
# Chart slices
# ---------------------------------------------------------------------------


class TestChartSlices:
    def test_empty_distribution_has_no_slices(self) -> None:
        assert to_chart_slices(()) == []

    def test_shares_and_colours(self) -> None:
        distribution = (
            CategoryTotal("Healthy", 3),
            CategoryTotal("Salmonella", 1),
            CategoryTotal("Newcastle", 0),
            CategoryTotal("Coccidiosis", 0),
        )
        assert to_chart_slices(distribution) == [
            ChartSlice("Healthy", 3, 75, Category.HEALTHY.color),
            ChartSlice("Salmonella", 1, 25, Category.SALMONELLA.color),
            ChartSlice("Newcastle", 0, 0, Category.NEWCASTLE.color),
            ChartSlice("Coccidiosis", 0, 0, Category.COCCIDIOSIS.color),
        ]

    def test_shares_round_half_up(self) -> None:
        distribution = (
            CategoryTotal("Healthy", 1),
            CategoryTotal("Salmonella", 7),
            CategoryTotal("Newcastle", 0),
            CategoryTotal("Coccidiosis", 0),
        )
        shares = [s.share for s in to_chart_slices(distribution)]
        assert shares == [13, 88, 0, 0]

    def test_unknown_label_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_chart_slices((CategoryTotal("Avian flu", 1),))
