"""Sales domain module.

This module turns canonical sales rows into aggregates and compact views:

- **guard**: row cap for one batch
- **aggregate**: total, by item name, by price mode, by hour, cancellations
- **summary**: top-N breakdowns, snapshot, KPIs, DataFrame views
- **persist**: dataset and line documents for a storage layer
- **api**: the batch driver tying ingestion and aggregation together

Example:
    >>> from pos_sales.sales import process_csv
    >>>
    >>> result = process_csv("exports/pos_2024-01-01.csv")
    >>> if result.ok and result.summary is not None:
    ...     print(result.summary.total)
"""

from pos_sales.sales.aggregate import aggregate, hour_key
from pos_sales.sales.api import process_csv, process_records, rows_frame
from pos_sales.sales.guard import check_batch_size
from pos_sales.sales.summary import compute_kpis, summary_snapshot, top_entries

__all__ = [
    "aggregate",
    "check_batch_size",
    "compute_kpis",
    "hour_key",
    "process_csv",
    "process_records",
    "rows_frame",
    "summary_snapshot",
    "top_entries",
]
