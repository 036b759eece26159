"""Schema validation for projected sales records.

Fields are checked in a fixed order (ts, name, qty, pricemode, linetotal,
status) and validation stops at the first failure, so an invalid row yields
exactly one message.

Examples:
    >>> from pos_sales.ingest.validation import validate_record
    >>> result = validate_record({"ts": "2024-01-01T09:00:00Z", "name": "Tea",
    ...     "qty": "1", "pricemode": "UNKNOWN", "linetotal": "300", "status": "done"})
    >>> result.record.status
    'OK'
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any

import numpy as np
import pandas as pd

from pos_sales.cleaning_utils import is_real_number, parse_number
from pos_sales.models import (
    STATUS_CANCELLED,
    STATUS_OK,
    ProjectedRecord,
    SalesStatus,
    ValidatedRecord,
    ValidationResult,
)

# Upstream status tokens treated as a completed sale
OK_STATUS_ALIASES = frozenset({"OK", "READY", "DONE", "COMPLETED", "SUCCESS", "FULFILLED"})


class _FieldError(ValueError):
    pass


def _require(value: Any, field: str) -> Any:
    if value is None:
        raise _FieldError(f"{field}: value is required")
    return value


def _check_ts(value: Any) -> Any:
    _require(value, "ts")
    if isinstance(value, (str, date, pd.Timestamp, np.datetime64)) or is_real_number(value):
        return value
    raise _FieldError(f"ts: expected a string, number or date, got {type(value).__name__}")


def _check_text(value: Any, field: str) -> str:
    _require(value, field)
    if not isinstance(value, str):
        raise _FieldError(f"{field}: expected a string, got {type(value).__name__}")
    trimmed = value.strip()
    if not trimmed:
        raise _FieldError(f"{field} is required")
    return trimmed


def _check_number(value: Any, field: str) -> float:
    _require(value, field)
    if is_real_number(value):
        if not math.isfinite(value):
            raise _FieldError(f"{field}: expected a finite number")
        return float(value)
    if isinstance(value, str):
        if not value.replace(",", "").strip():
            raise _FieldError(f"{field}: value is required")
        parsed = parse_number(value)
        if parsed is None:
            raise _FieldError(f'{field}: unable to parse number from "{value}"')
        return parsed
    raise _FieldError(f"{field}: expected a number or numeric string")


def normalize_status(value: Any) -> SalesStatus:
    """Map an upstream status token onto OK or CANCELLED.

    Matching is case-insensitive after trimming. Unrecognised tokens are
    rejected rather than guessed.

    Raises:
        ValueError: If the token is not a known status.

    Examples:
        >>> normalize_status(" done ")
        'OK'
        >>> normalize_status("Cancelled")
        'CANCELLED'
    """
    _require(value, "status")
    if not isinstance(value, str):
        raise _FieldError(f"status: expected a string, got {type(value).__name__}")
    upper = value.strip().upper()
    if upper == STATUS_CANCELLED:
        return STATUS_CANCELLED
    if upper in OK_STATUS_ALIASES:
        return STATUS_OK
    raise _FieldError(f"status: unrecognized value '{upper}' (expected OK or CANCELLED)")


def validate_record(projected: ProjectedRecord) -> ValidationResult:
    """Validate and coerce a projected record.

    Args:
        projected: Mapping with the six canonical keys.

    Returns:
        ValidationResult holding either the ValidatedRecord or the first
        error message.

    """
    try:
        ts = _check_ts(projected.get("ts"))
        name = _check_text(projected.get("name"), "name")
        qty = _check_number(projected.get("qty"), "qty")
        pricemode = _check_text(projected.get("pricemode"), "pricemode")
        linetotal = _check_number(projected.get("linetotal"), "linetotal")
        status = normalize_status(projected.get("status"))
    except _FieldError as e:
        return ValidationResult(error=str(e))

    return ValidationResult(
        record=ValidatedRecord(
            ts=ts,
            name=name,
            qty=qty,
            pricemode=pricemode,
            linetotal=linetotal,
            status=status,
        )
    )
