"""Tests for the batch guard and the aggregation engine."""

from dataclasses import FrozenInstanceError

import pandas as pd
import pytest

from pos_sales.config import MAX_ROWS
from pos_sales.exceptions import BatchLimitError, DataQualityError
from pos_sales.models import AggregateBucket
from pos_sales.sales.aggregate import aggregate, hour_key
from pos_sales.sales.guard import check_batch_size
from tests.test_utils import make_row


@pytest.fixture
def burger_rows() -> list:
    """One sale and one cancellation of the same item within an hour."""
    return [
        make_row(name="Burger", qty=2, linetotal=1200, ts="2024-01-01T09:15:00Z"),
        make_row(name="Burger", qty=1, linetotal=600, status="CANCELLED", ts="2024-01-01T09:40:00Z"),
    ]


@pytest.fixture
def mixed_rows() -> list:
    """Rows across items, price modes and hours."""
    return [
        make_row(name="Burger", qty=2, linetotal=1200, pricemode="dine-in", ts="2024-01-01T09:15:00Z"),
        make_row(name="Fries", qty=3, linetotal=900, pricemode="takeout", ts="2024-01-01T10:05:00Z"),
        make_row(name="Cola", qty=1, linetotal=250, pricemode="takeout", ts="2024-01-01T10:59:59Z"),
        make_row(
            name="Fries",
            qty=1,
            linetotal=300,
            pricemode="takeout",
            status="CANCELLED",
            ts="2024-01-01T11:00:00Z",
        ),
        make_row(
            name="Burger",
            qty=1,
            linetotal=600,
            pricemode="delivery",
            status="CANCELLED",
            ts="2024-01-02T09:30:00Z",
        ),
    ]


class TestBatchGuard:
    def test_exactly_the_cap_passes(self) -> None:
        check_batch_size([None] * MAX_ROWS)

    def test_one_over_the_cap_fails(self) -> None:
        with pytest.raises(BatchLimitError) as excinfo:
            check_batch_size([None] * (MAX_ROWS + 1))
        assert excinfo.value.row_count == MAX_ROWS + 1
        assert excinfo.value.max_rows == MAX_ROWS

    def test_custom_cap(self) -> None:
        with pytest.raises(BatchLimitError):
            check_batch_size([1, 2, 3], max_rows=2)

    def test_batch_limit_is_a_data_quality_error(self) -> None:
        assert issubclass(BatchLimitError, DataQualityError)


class TestHourKey:
    def test_truncates_to_the_hour(self) -> None:
        assert hour_key(pd.Timestamp("2024-01-01T09:59:59Z")) == "2024-01-01 09:00"

    def test_uses_the_given_timezone(self) -> None:
        ts = pd.Timestamp("2024-01-01T20:30:00Z")
        assert hour_key(ts, "Asia/Tokyo") == "2024-01-02 05:00"

    def test_naive_timestamps_are_utc(self) -> None:
        assert hour_key(pd.Timestamp("2024-01-01 09:30")) == "2024-01-01 09:00"


class TestAggregate:
    def test_example_scenario(self, burger_rows: list) -> None:
        summary = aggregate(burger_rows)
        assert summary.total == AggregateBucket(signed_total=600, signed_qty=1, count=2)
        assert summary.cancelled.count == 1
        assert summary.cancelled.amount == 600
        assert summary.by_hour["2024-01-01 09:00"] == AggregateBucket(600, 1, 2)
        assert summary.by_name["Burger"] == AggregateBucket(600, 1, 2)
        assert summary.by_pricemode["dine-in"] == AggregateBucket(600, 1, 2)

    def test_totals_equal_sum_of_rows(self, mixed_rows: list) -> None:
        summary = aggregate(mixed_rows)
        assert summary.total.signed_total == pytest.approx(sum(r.signed_total for r in mixed_rows))
        assert summary.total.signed_qty == pytest.approx(sum(r.signed_qty for r in mixed_rows))
        assert summary.total.count == len(mixed_rows)

    def test_breakdowns_add_up_to_total(self, mixed_rows: list) -> None:
        summary = aggregate(mixed_rows)
        for breakdown in (summary.by_name, summary.by_pricemode, summary.by_hour):
            assert sum(b.count for b in breakdown.values()) == summary.total.count
            assert sum(b.signed_total for b in breakdown.values()) == pytest.approx(
                summary.total.signed_total
            )

    def test_order_does_not_matter(self, mixed_rows: list) -> None:
        forward = aggregate(mixed_rows)
        backward = aggregate(list(reversed(mixed_rows)))
        assert forward.total == backward.total
        assert forward.cancelled == backward.cancelled
        assert dict(forward.by_name) == dict(backward.by_name)
        assert dict(forward.by_hour) == dict(backward.by_hour)

    def test_cancelled_totals(self, mixed_rows: list) -> None:
        summary = aggregate(mixed_rows)
        cancelled = [r for r in mixed_rows if r.status == "CANCELLED"]
        assert summary.cancelled.count == len(cancelled)
        assert summary.cancelled.amount == pytest.approx(sum(abs(r.signed_total) for r in cancelled))

    def test_buckets_exist_only_for_seen_keys(self, mixed_rows: list) -> None:
        summary = aggregate(mixed_rows)
        assert set(summary.by_name) == {"Burger", "Fries", "Cola"}
        assert set(summary.by_pricemode) == {"dine-in", "takeout", "delivery"}
        assert set(summary.by_hour) == {
            "2024-01-01 09:00",
            "2024-01-01 10:00",
            "2024-01-01 11:00",
            "2024-01-02 09:00",
        }
        assert summary.by_hour["2024-01-01 10:00"] == AggregateBucket(1150, 4, 2)

    def test_breakdowns_are_read_only(self, burger_rows: list) -> None:
        summary = aggregate(burger_rows)
        with pytest.raises(TypeError):
            summary.by_name["Other"] = AggregateBucket()  # type: ignore[index]

    def test_buckets_and_totals_are_frozen(self, burger_rows: list) -> None:
        summary = aggregate(burger_rows)
        with pytest.raises(FrozenInstanceError):
            summary.total.count = 0  # type: ignore[misc]
        with pytest.raises(FrozenInstanceError):
            summary.by_name["Burger"].signed_total = 0.0  # type: ignore[misc]
        with pytest.raises(FrozenInstanceError):
            summary.cancelled.amount = 0.0  # type: ignore[misc]

    def test_adding_a_row_leaves_the_bucket_unchanged(self, burger_rows: list) -> None:
        bucket = AggregateBucket()
        grown = bucket.add(burger_rows[0])
        assert bucket == AggregateBucket()
        assert grown == AggregateBucket(1200, 2, 1)

    def test_hour_keys_follow_timezone(self, burger_rows: list) -> None:
        summary = aggregate(burger_rows, timezone="Asia/Tokyo")
        assert list(summary.by_hour) == ["2024-01-01 18:00"]

    def test_each_call_builds_fresh_buckets(self, burger_rows: list) -> None:
        first = aggregate(burger_rows)
        second = aggregate(burger_rows)
        assert first.total is not second.total
        assert first.by_name["Burger"] is not second.by_name["Burger"]

    def test_empty_rows_are_refused(self) -> None:
        with pytest.raises(DataQualityError):
            aggregate([])

    def test_row_cap_boundary(self) -> None:
        rows = [make_row(name=f"Item {i % 7}") for i in range(MAX_ROWS)]
        assert aggregate(rows).total.count == MAX_ROWS
        with pytest.raises(BatchLimitError):
            aggregate(rows + [make_row()])
