"""Gold layer: compact views over aggregated sales.

- top_entries: top-N breakdown by absolute signed total (stable ordering)
- summary_snapshot: fixed-limit snapshot stored alongside a dataset
- breakdown_tables: per-dimension panels with dashboard limits
- hourly_frame / entries_frame: DataFrame views for charts and reports
- compute_kpis: headline figures for one batch
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any, Union

import pandas as pd

from pos_sales.config import BREAKDOWN_LIMITS, SNAPSHOT_LIMIT
from pos_sales.models import AggregateBucket, AggregatedSales, BreakdownEntry, SalesRow

ENTRY_COLUMNS = ["key", "signed_total", "signed_qty", "count"]

Breakdown = Union[Mapping[str, AggregateBucket], Iterable[BreakdownEntry]]


def _as_entries(breakdown: Breakdown) -> list[BreakdownEntry]:
    if isinstance(breakdown, Mapping):
        return [
            BreakdownEntry(
                key=key,
                signed_total=bucket.signed_total,
                signed_qty=bucket.signed_qty,
                count=bucket.count,
            )
            for key, bucket in breakdown.items()
        ]
    return list(breakdown)


def top_entries(breakdown: Breakdown, limit: int) -> list[BreakdownEntry]:
    """Return at most limit entries ordered by descending |signed_total|.

    Ties keep the breakdown's iteration order (sorted() is stable), so the
    same input always produces the same output. Passing an already
    summarised list returns it unchanged.

    Args:
        breakdown: Mapping of key -> bucket, or a sequence of entries.
        limit: Maximum number of entries to return.

    Returns:
        List of BreakdownEntry.

    Raises:
        ValueError: If limit is negative.

    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    entries = _as_entries(breakdown)
    ranked = sorted(entries, key=lambda e: abs(e.signed_total), reverse=True)
    return ranked[:limit]


def summary_snapshot(summary: AggregatedSales, limit: int = SNAPSHOT_LIMIT) -> dict[str, Any]:
    """Build the compact summary payload persisted with a dataset.

    The limit is independent of the dashboard panel limits.
    """
    return {
        "total": asdict(summary.total),
        "cancelled": asdict(summary.cancelled),
        "top_by_name": [e.to_dict() for e in top_entries(summary.by_name, limit)],
        "top_by_pricemode": [e.to_dict() for e in top_entries(summary.by_pricemode, limit)],
        "top_by_hour": [e.to_dict() for e in top_entries(summary.by_hour, limit)],
    }


def breakdown_tables(
    summary: AggregatedSales,
    limits: Mapping[str, int] = BREAKDOWN_LIMITS,
) -> dict[str, list[BreakdownEntry]]:
    """Top entries per dimension using the dashboard panel limits."""
    return {
        "name": top_entries(summary.by_name, limits["name"]),
        "pricemode": top_entries(summary.by_pricemode, limits["pricemode"]),
        "hour": top_entries(summary.by_hour, limits["hour"]),
    }


def entries_frame(entries: Sequence[BreakdownEntry]) -> pd.DataFrame:
    """DataFrame with one row per entry, in the given order."""
    return pd.DataFrame([e.to_dict() for e in entries], columns=ENTRY_COLUMNS)


def hourly_frame(summary: AggregatedSales) -> pd.DataFrame:
    """Hour buckets in chronological order, for time-series charts."""
    df = entries_frame(_as_entries(summary.by_hour))
    return df.sort_values("key", kind="stable").reset_index(drop=True)


@dataclass(frozen=True)
class SalesKPIs:
    """Headline figures for one batch.

    Attributes:
        net_sales: Sum of signed totals (cancellations subtracted).
        gross_sales: Sum of line totals before cancellations.
        net_qty: Sum of signed quantities.
        line_count: Number of aggregated rows.
        completed_count: Rows with status OK.
        cancelled_count: Rows with status CANCELLED.
        cancelled_amount: Absolute amount of cancelled rows.
        average_per_line: net_sales / line_count.
        cancellation_rate: cancelled_count / line_count.
        unique_items: Number of distinct item names.
    """

    net_sales: float
    gross_sales: float
    net_qty: float
    line_count: int
    completed_count: int
    cancelled_count: int
    cancelled_amount: float
    average_per_line: float
    cancellation_rate: float
    unique_items: int


def compute_kpis(summary: AggregatedSales, rows: Sequence[SalesRow]) -> SalesKPIs:
    """Compute headline figures from aggregates and the rows they came from."""
    count = summary.total.count
    cancelled = summary.cancelled.count
    return SalesKPIs(
        net_sales=summary.total.signed_total,
        gross_sales=sum(row.linetotal for row in rows),
        net_qty=summary.total.signed_qty,
        line_count=count,
        completed_count=max(count - cancelled, 0),
        cancelled_count=cancelled,
        cancelled_amount=summary.cancelled.amount,
        average_per_line=summary.total.signed_total / count if count else 0.0,
        cancellation_rate=cancelled / count if count else 0.0,
        unique_items=len({row.name for row in rows}),
    )
