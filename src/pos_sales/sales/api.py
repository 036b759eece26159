"""Public API for processing one uploaded sales batch.

This module drives the full pipeline for a batch:
1. Resolve each raw record onto the canonical fields
2. Validate and normalize it, collecting a ParseIssue for rejected rows
3. Enforce the row cap on the accepted rows
4. Aggregate the accepted rows

Per-row problems never abort the batch. Exceeding the row cap rejects the
whole batch, but the counts and issues are still reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import pandas as pd

from pos_sales.config import IngestConfig
from pos_sales.exceptions import BatchLimitError, DataQualityError
from pos_sales.ingest.fields import project_record
from pos_sales.ingest.normalize import normalize_record
from pos_sales.ingest.reader import CsvSource, read_sales_csv
from pos_sales.ingest.validation import validate_record
from pos_sales.models import BatchResult, ParseIssue, RawRecord, SalesRow
from pos_sales.sales.aggregate import aggregate
from pos_sales.sales.guard import check_batch_size

logger = logging.getLogger(__name__)

ROW_COLUMNS = ["ts", "name", "qty", "pricemode", "linetotal", "status", "signed_qty", "signed_total"]


def process_records(
    records: Iterable[RawRecord],
    config: IngestConfig | None = None,
) -> BatchResult:
    """Run one batch of raw records through the pipeline.

    Args:
        records: Header-keyed records, one per data line, in source order.
        config: Ingestion settings. Defaults to IngestConfig().

    Returns:
        BatchResult. When the batch exceeds the row cap, rows is empty,
        summary is None and error is set; counts and issues are still filled.

    Raises:
        DataQualityError: If a record is not a mapping.

    """
    config = config or IngestConfig()
    rows: list[SalesRow] = []
    issues: list[ParseIssue] = []
    total = 0

    for index, record in enumerate(records, start=1):
        total = index
        if not isinstance(record, Mapping):
            raise DataQualityError(f"Record {index} is not a mapping: {type(record).__name__}")

        validated = validate_record(project_record(record))
        if not validated.ok:
            logger.debug("Row %d rejected: %s", index, validated.error)
            issues.append(ParseIssue(index=index, message=validated.error))
            continue

        normalized = normalize_record(validated.record)
        if not normalized.ok:
            logger.debug("Row %d rejected: %s", index, normalized.error)
            issues.append(ParseIssue(index=index, message=normalized.error))
            continue

        rows.append(normalized.row)

    result = BatchResult(
        issues=issues,
        total_row_count=total,
        valid_row_count=len(rows),
        invalid_row_count=len(issues),
    )

    try:
        check_batch_size(rows, config.max_rows)
    except BatchLimitError as e:
        logger.warning("Batch rejected: %s", e)
        result.error = str(e)
        return result

    result.rows = rows
    if rows:
        result.summary = aggregate(rows, max_rows=config.max_rows, timezone=config.timezone)

    logger.info(
        "Processed batch: %d total, %d valid, %d invalid",
        result.total_row_count,
        result.valid_row_count,
        result.invalid_row_count,
    )
    return result


def process_csv(source: CsvSource, config: IngestConfig | None = None) -> BatchResult:
    """Read a CSV export and process it as one batch.

    Raises:
        FileNotFoundError: If source is a missing path.
        SourceFormatError: If the CSV cannot be split into rows.

    """
    return process_records(read_sales_csv(source), config)


def rows_frame(rows: Sequence[SalesRow]) -> pd.DataFrame:
    """DataFrame with one row per accepted sales line."""
    return pd.DataFrame(
        [{col: getattr(row, col) for col in ROW_COLUMNS} for row in rows],
        columns=ROW_COLUMNS,
    )
