"""Batch guard: enforce the row cap before aggregation runs."""

from __future__ import annotations

from collections.abc import Sized

from pos_sales.config import MAX_ROWS
from pos_sales.exceptions import BatchLimitError


def check_batch_size(rows: Sized, max_rows: int = MAX_ROWS) -> None:
    """Reject a batch holding more than max_rows accepted rows.

    A batch of exactly max_rows passes.

    Raises:
        BatchLimitError: If len(rows) > max_rows.

    """
    if len(rows) > max_rows:
        raise BatchLimitError(len(rows), max_rows)
