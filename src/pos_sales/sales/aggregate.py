"""Gold layer: fold sales rows into total, breakdown and cancellation aggregates.

A single linear pass over the rows fills a total bucket plus three keyed
breakdowns (item name, price mode, hour). A key gets its bucket on first
use. Buckets are frozen; folding a row in replaces the bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import MappingProxyType

import pandas as pd

from pos_sales.config import DEFAULT_TIMEZONE, HOUR_KEY_FORMAT, MAX_ROWS
from pos_sales.exceptions import DataQualityError
from pos_sales.models import AggregateBucket, AggregatedSales, CancelledTotals, SalesRow
from pos_sales.sales.guard import check_batch_size

logger = logging.getLogger(__name__)

_EMPTY_BUCKET = AggregateBucket()


def hour_key(ts: pd.Timestamp, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Truncate a timestamp to its hour bucket key in the given timezone.

    Naive timestamps are taken as UTC.

    Examples:
        >>> hour_key(pd.Timestamp("2024-01-01T09:40:00Z"))
        '2024-01-01 09:00'
        >>> hour_key(pd.Timestamp("2024-01-01T09:40:00Z"), "Asia/Tokyo")
        '2024-01-01 18:00'
    """
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(timezone).strftime(HOUR_KEY_FORMAT)


def _add_to_bucket(buckets: dict[str, AggregateBucket], key: str, row: SalesRow) -> None:
    buckets[key] = buckets.get(key, _EMPTY_BUCKET).add(row)


def aggregate(
    rows: Sequence[SalesRow],
    max_rows: int = MAX_ROWS,
    timezone: str = DEFAULT_TIMEZONE,
) -> AggregatedSales:
    """Aggregate a batch of rows.

    Args:
        rows: Normalized rows, at most max_rows of them.
        max_rows: Row cap, re-checked here.
        timezone: Timezone used for hour bucket keys.

    Returns:
        AggregatedSales for the batch.

    Raises:
        BatchLimitError: If the batch exceeds max_rows.
        DataQualityError: If rows is empty.

    """
    check_batch_size(rows, max_rows)
    if not rows:
        raise DataQualityError("Cannot aggregate an empty row set")

    total = _EMPTY_BUCKET
    by_name: dict[str, AggregateBucket] = {}
    by_pricemode: dict[str, AggregateBucket] = {}
    by_hour: dict[str, AggregateBucket] = {}
    cancelled_count = 0
    cancelled_amount = 0.0

    for row in rows:
        total = total.add(row)
        _add_to_bucket(by_name, row.name, row)
        _add_to_bucket(by_pricemode, row.pricemode, row)
        _add_to_bucket(by_hour, hour_key(row.ts, timezone), row)

        if row.is_cancelled:
            cancelled_count += 1
            cancelled_amount += abs(row.signed_total)

    logger.debug(
        "Aggregated %d row(s): %d item(s), %d price mode(s), %d hour(s)",
        total.count,
        len(by_name),
        len(by_pricemode),
        len(by_hour),
    )

    return AggregatedSales(
        total=total,
        by_name=MappingProxyType(by_name),
        by_pricemode=MappingProxyType(by_pricemode),
        by_hour=MappingProxyType(by_hour),
        cancelled=CancelledTotals(count=cancelled_count, amount=cancelled_amount),
    )
