"""Row normalization: validated record -> canonical SalesRow.

This is the only place the cancellation sign is established. Downstream
aggregation trusts signed_qty and signed_total as they are.

Timestamps are resolved in this order:
1. A date value (datetime, pandas Timestamp, numpy datetime64) is used as is.
2. A number is epoch seconds when its magnitude is below 1e11, otherwise
   epoch milliseconds.
3. A numeric string is epoch seconds when it is exactly 10 characters long,
   otherwise epoch milliseconds.
4. Anything else goes through pandas date parsing.

The 1e11 threshold and the 10-character rule are heuristics about the
shape of typical exports, not format markers; a seconds value written with
a leading zero or a fractional part falls through to milliseconds.

Naive date-times are read as UTC. Every resolved timestamp is tz-aware UTC.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from pos_sales.cleaning_utils import is_real_number
from pos_sales.models import (
    STATUS_CANCELLED,
    NormalizationResult,
    SalesRow,
    ValidatedRecord,
)

logger = logging.getLogger(__name__)

# Epoch values below this magnitude are taken as seconds
EPOCH_SECONDS_THRESHOLD = 1e11

# Instants further than 100,000,000 days from the epoch are invalid
MAX_EPOCH_MS = 8.64e15

# A numeric timestamp string of this length is taken as seconds
EPOCH_SECONDS_STRING_LENGTH = 10

# pandas resolves these relative to the wall clock
_RELATIVE_TOKENS = frozenset({"now", "today"})


def _as_utc(ts: pd.Timestamp) -> pd.Timestamp:
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _from_epoch_ms(ms: float) -> pd.Timestamp:
    if not math.isfinite(ms) or abs(ms) > MAX_EPOCH_MS:
        raise ValueError("Invalid numeric timestamp")
    try:
        return pd.Timestamp(ms, unit="ms", tz="UTC")
    except (ValueError, OverflowError) as e:
        raise ValueError("Invalid numeric timestamp") from e


def to_timestamp(value: Any) -> pd.Timestamp:
    """Resolve a timestamp from its source representation.

    Args:
        value: Date value, epoch number, or string.

    Returns:
        tz-aware UTC Timestamp.

    Raises:
        ValueError: If the value cannot be resolved to a valid instant.

    Examples:
        >>> to_timestamp(1704100500)
        Timestamp('2024-01-01 09:15:00+0000', tz='UTC')
        >>> to_timestamp("2024-01-01T09:15:00Z")
        Timestamp('2024-01-01 09:15:00+0000', tz='UTC')
    """
    if isinstance(value, (datetime, pd.Timestamp, np.datetime64)):
        ts = pd.Timestamp(value)
        if pd.isna(ts):
            raise ValueError("Invalid date value")
        return _as_utc(ts)

    if isinstance(value, date):
        return pd.Timestamp(value.year, value.month, value.day, tz="UTC")

    if is_real_number(value):
        number = float(value)
        if math.isfinite(number) and abs(number) < EPOCH_SECONDS_THRESHOLD:
            number *= 1000
        return _from_epoch_ms(number)

    if not isinstance(value, str):
        raise ValueError("Timestamp must be a string")

    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Timestamp is required")

    try:
        numeric = float(trimmed)
    except ValueError:
        numeric = None
    # float() accepts underscore digit groups such as "1_000"
    if numeric is not None and "_" in trimmed:
        raise ValueError(f"Unable to parse timestamp: {value}")
    if numeric is not None and math.isfinite(numeric):
        if len(trimmed) == EPOCH_SECONDS_STRING_LENGTH:
            numeric *= 1000
        try:
            return _from_epoch_ms(numeric)
        except ValueError:
            logger.debug("Numeric timestamp %r out of range, trying date parsing", trimmed)

    if trimmed.lower() not in _RELATIVE_TOKENS:
        try:
            parsed = pd.to_datetime(trimmed, utc=True)
        except (ValueError, TypeError, OverflowError):
            parsed = pd.NaT
        if not pd.isna(parsed):
            return parsed

    raise ValueError(f"Unable to parse timestamp: {value}")


def normalize_record(record: ValidatedRecord) -> NormalizationResult:
    """Build a SalesRow from a validated record.

    qty and linetotal are stored as absolute values; the signed fields are
    negative exactly when the status is CANCELLED.

    Returns:
        NormalizationResult holding either the row or the error message.

    """
    try:
        ts = to_timestamp(record.ts)
    except ValueError as e:
        return NormalizationResult(error=str(e))

    qty = abs(record.qty)
    linetotal = abs(record.linetotal)
    multiplier = -1 if record.status == STATUS_CANCELLED else 1

    return NormalizationResult(
        row=SalesRow(
            ts=ts,
            name=record.name,
            qty=qty,
            pricemode=record.pricemode,
            linetotal=linetotal,
            status=record.status,
            signed_qty=multiplier * qty,
            signed_total=multiplier * linetotal,
        )
    )
