"""Persistence payloads for processed datasets.

Storage itself belongs to the caller. This module builds the documents a
storage layer writes (one dataset document plus one document per line) and
rebuilds rows from stored line documents.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from pos_sales.cleaning_utils import is_real_number
from pos_sales.config import SNAPSHOT_LIMIT
from pos_sales.exceptions import DataQualityError
from pos_sales.models import STATUS_CANCELLED, STATUS_OK, AggregatedSales, SalesRow
from pos_sales.sales.summary import summary_snapshot

logger = logging.getLogger(__name__)

_NUMERIC_LINE_FIELDS = ("qty", "linetotal", "signed_qty", "signed_total")


def line_records(rows: Sequence[SalesRow]) -> list[dict[str, Any]]:
    """One JSON-friendly document per row, timestamps as ISO 8601 strings."""
    return [
        {
            "ts": row.ts.isoformat(),
            "name": row.name,
            "qty": row.qty,
            "pricemode": row.pricemode,
            "linetotal": row.linetotal,
            "status": row.status,
            "signed_qty": row.signed_qty,
            "signed_total": row.signed_total,
        }
        for row in rows
    ]


def build_dataset_payload(
    rows: Sequence[SalesRow],
    summary: AggregatedSales,
    filename: str,
    snapshot_limit: int = SNAPSHOT_LIMIT,
) -> dict[str, Any]:
    """Build the dataset document for a processed batch.

    Args:
        rows: Accepted rows of the batch.
        summary: Aggregates for those rows.
        filename: Name of the uploaded file.
        snapshot_limit: Entries per breakdown in the summary snapshot.

    Returns:
        Dictionary with row count, totals, cancellation figures, the summary
        snapshot and the line documents.

    Raises:
        DataQualityError: If rows is empty.

    """
    if not rows:
        raise DataQualityError("No rows to save")

    return {
        "filename": filename,
        "rows": len(rows),
        "sum_signed_total": summary.total.signed_total,
        "sum_signed_qty": summary.total.signed_qty,
        "cancelled_count": summary.cancelled.count,
        "cancelled_amount": summary.cancelled.amount,
        "summary_snapshot": summary_snapshot(summary, snapshot_limit),
        "lines": line_records(rows),
    }


def write_payload_json(path: str | Path, payload: Mapping[str, Any]) -> Path:
    """Write a dataset payload as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Wrote dataset payload: %s", path)
    return path


def _row_from_line(data: Mapping[str, Any]) -> Optional[SalesRow]:
    raw_ts = data.get("ts")
    if raw_ts is None:
        return None
    try:
        ts = pd.Timestamp(raw_ts)
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")

    if not all(is_real_number(data.get(f)) for f in _NUMERIC_LINE_FIELDS):
        return None

    name = data.get("name")
    pricemode = data.get("pricemode")
    if not isinstance(name, str) or not name or not isinstance(pricemode, str) or not pricemode:
        return None

    status = STATUS_CANCELLED if data.get("status") == STATUS_CANCELLED else STATUS_OK
    return SalesRow(
        ts=ts,
        name=name,
        qty=float(data["qty"]),
        pricemode=pricemode,
        linetotal=float(data["linetotal"]),
        status=status,
        signed_qty=float(data["signed_qty"]),
        signed_total=float(data["signed_total"]),
    )


def rows_from_line_records(records: Iterable[Mapping[str, Any]]) -> list[SalesRow]:
    """Rebuild rows from stored line documents, oldest first.

    Documents with a missing timestamp, non-numeric amounts, or an empty
    name or price mode are skipped.
    """
    rows: list[SalesRow] = []
    skipped = 0
    for data in records:
        row = _row_from_line(data)
        if row is None:
            skipped += 1
            continue
        rows.append(row)

    if skipped:
        logger.warning("Skipped %d malformed line document(s)", skipped)

    rows.sort(key=lambda r: r.ts)
    return rows
