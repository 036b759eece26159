"""Configuration for POS sales ingestion.

Module-level constants are the shared defaults used by every stage. The
row cap in particular is defined once here and read by both the batch
guard and the aggregation engine.

Examples:
    >>> from pos_sales.config import IngestConfig, MAX_ROWS
    >>> MAX_ROWS
    1000
    >>> IngestConfig(timezone="Asia/Tokyo").issue_display_limit
    20
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import pandas as pd

from pos_sales.exceptions import ConfigError

# Maximum number of accepted rows in one batch
MAX_ROWS = 1000

# Number of issues shown to the user (counting is never truncated)
ISSUE_DISPLAY_LIMIT = 20

# Entries per breakdown in the persisted summary snapshot
SNAPSHOT_LIMIT = 10

# Entries per breakdown panel in the dashboard views
BREAKDOWN_LIMITS = {"name": 15, "pricemode": 10, "hour": 24}

# Hour buckets are truncated in this timezone unless told otherwise
DEFAULT_TIMEZONE = "UTC"

HOUR_KEY_FORMAT = "%Y-%m-%d %H:00"


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")


def _check_timezone(tz: str) -> None:
    try:
        pd.Timestamp(0, tz="UTC").tz_convert(tz)
    except Exception as e:
        raise ConfigError(f"Unknown timezone '{tz}'") from e


@dataclass(frozen=True)
class IngestConfig:
    """Settings for one ingestion run.

    Attributes:
        max_rows: Row cap enforced by the batch guard and the aggregation engine.
        issue_display_limit: Number of issues a caller should show (display only).
        snapshot_limit: Entries per breakdown in the persisted summary snapshot.
        timezone: Timezone used to truncate timestamps into hour buckets.
    """

    max_rows: int = MAX_ROWS
    issue_display_limit: int = ISSUE_DISPLAY_LIMIT
    snapshot_limit: int = SNAPSHOT_LIMIT
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        _check_positive("max_rows", self.max_rows)
        _check_positive("issue_display_limit", self.issue_display_limit)
        _check_positive("snapshot_limit", self.snapshot_limit)
        _check_timezone(self.timezone)

    @classmethod
    def from_env(cls) -> IngestConfig:
        """Build a config, honouring POS_SALES_TIMEZONE and POS_SALES_ISSUE_LIMIT.

        Returns:
            IngestConfig instance.

        Raises:
            ConfigError: If an override is not valid.

        """
        timezone = os.environ.get("POS_SALES_TIMEZONE") or DEFAULT_TIMEZONE
        raw_limit = os.environ.get("POS_SALES_ISSUE_LIMIT")
        issue_limit = ISSUE_DISPLAY_LIMIT
        if raw_limit:
            try:
                issue_limit = int(raw_limit)
            except ValueError as e:
                raise ConfigError(f"POS_SALES_ISSUE_LIMIT must be an integer, got '{raw_limit}'") from e
        return cls(issue_display_limit=issue_limit, timezone=timezone)
