"""POS Sales - ingestion and aggregation of point-of-sale exports.

This package reads POS export files whose column names vary from system to
system, reconciles every row against a canonical sales record, and builds
aggregate summaries with cancellations carried as negative signed metrics.

Module Structure:
    pos_sales.ingest: Field resolution, validation, normalization, CSV reading
    pos_sales.sales: Row cap, aggregation, summaries, persistence payloads
    pos_sales.config: Shared constants and IngestConfig
    pos_sales.cli: Command-line entry point

Quick Start:
    >>> from pos_sales import IngestConfig
    >>> from pos_sales.sales import process_csv, summary_snapshot
    >>>
    >>> result = process_csv("exports/sales.csv", IngestConfig(timezone="Asia/Tokyo"))
    >>> print(result.valid_row_count, result.invalid_row_count)
    >>> for issue in result.display_issues(20):
    ...     print(issue.index, issue.message)
    >>> snapshot = summary_snapshot(result.summary)

Data flow:
    raw record -> projected record -> validated record -> SalesRow
    -> row cap -> AggregatedSales -> top-N snapshot
"""

__version__ = "0.1.0"

from pos_sales.config import MAX_ROWS, IngestConfig
from pos_sales.exceptions import (
    BatchLimitError,
    ConfigError,
    DataQualityError,
    SalesIngestError,
    SourceFormatError,
)

__all__ = [
    "MAX_ROWS",
    "BatchLimitError",
    "ConfigError",
    "DataQualityError",
    "IngestConfig",
    "SalesIngestError",
    "SourceFormatError",
    "__version__",
]
