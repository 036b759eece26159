"""Typed records shared across the ingestion pipeline.

Only the field resolver and the validator look at open, untyped mappings.
Everything from ValidatedRecord onwards is a fixed-shape dataclass.

Data flow:
    RawRecord -> ProjectedRecord -> ValidatedRecord -> SalesRow
    list[SalesRow] -> AggregatedSales -> BreakdownEntry snapshots
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal, Union

import numpy as np
import pandas as pd

STATUS_OK = "OK"
STATUS_CANCELLED = "CANCELLED"

SalesStatus = Literal["OK", "CANCELLED"]

RawRecord = Mapping[str, Any]
ProjectedRecord = dict[str, Any]
TimestampInput = Union[str, int, float, datetime, date, pd.Timestamp, np.datetime64]


@dataclass(frozen=True)
class ValidatedRecord:
    """A projected record whose fields all passed coercion.

    The timestamp is still in its source representation; the normalizer
    resolves it.
    """

    ts: TimestampInput
    name: str
    qty: float
    pricemode: str
    linetotal: float
    status: SalesStatus


@dataclass(frozen=True)
class SalesRow:
    """Canonical sales line.

    qty and linetotal are always non-negative. The cancellation sign lives
    only in signed_qty and signed_total.
    """

    ts: pd.Timestamp
    name: str
    qty: float
    pricemode: str
    linetotal: float
    status: SalesStatus
    signed_qty: float
    signed_total: float

    @property
    def is_cancelled(self) -> bool:
        return self.status == STATUS_CANCELLED


@dataclass(frozen=True)
class AggregateBucket:
    """Additive totals for one breakdown key."""

    signed_total: float = 0.0
    signed_qty: float = 0.0
    count: int = 0

    def add(self, row: SalesRow) -> AggregateBucket:
        """Return a new bucket with row folded in."""
        return AggregateBucket(
            signed_total=self.signed_total + row.signed_total,
            signed_qty=self.signed_qty + row.signed_qty,
            count=self.count + 1,
        )


@dataclass(frozen=True)
class CancelledTotals:
    """Count and absolute amount of cancelled rows."""

    count: int = 0
    amount: float = 0.0


@dataclass(frozen=True)
class AggregatedSales:
    """Result of aggregating one batch.

    Immutable: the buckets are frozen and the breakdowns are read-only views.

    Attributes:
        total: Bucket over every row.
        by_name: Buckets keyed by item name.
        by_pricemode: Buckets keyed by price mode.
        by_hour: Buckets keyed by hour (YYYY-MM-DD HH:00).
        cancelled: Cancelled row count and absolute amount.
    """

    total: AggregateBucket
    by_name: Mapping[str, AggregateBucket]
    by_pricemode: Mapping[str, AggregateBucket]
    by_hour: Mapping[str, AggregateBucket]
    cancelled: CancelledTotals


@dataclass(frozen=True)
class BreakdownEntry:
    """One line of a top-N breakdown."""

    key: str
    signed_total: float
    signed_qty: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "signed_total": self.signed_total,
            "signed_qty": self.signed_qty,
            "count": self.count,
        }


@dataclass(frozen=True)
class ParseIssue:
    """A rejected input row.

    Attributes:
        index: 1-based position of the row in the source.
        message: Human-readable reason for the rejection.
    """

    index: int
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one projected record: a record or an error."""

    record: ValidatedRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalizing one validated record: a row or an error."""

    row: SalesRow | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Everything a caller needs to report on one uploaded batch.

    Attributes:
        rows: Accepted rows (empty when the batch was rejected).
        summary: Aggregates, or None when there is nothing to aggregate
            or the batch was rejected.
        issues: Every per-row issue, ordered by source index.
        total_row_count: Rows found in the source, rejected ones included.
        valid_row_count: Rows that passed validation and normalization.
        invalid_row_count: Rows that produced an issue.
        error: Whole-batch failure message, if any.
    """

    rows: list[SalesRow] = field(default_factory=list)
    summary: AggregatedSales | None = None
    issues: list[ParseIssue] = field(default_factory=list)
    total_row_count: int = 0
    valid_row_count: int = 0
    invalid_row_count: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def display_issues(self, limit: int) -> list[ParseIssue]:
        """Return the earliest issues, up to limit."""
        return self.issues[:limit]
