"""Ingestion layer: raw export records -> canonical sales rows.

Stages, in data-flow order:

- **fields**: resolve arbitrary headers onto the six canonical fields
- **validation**: type checks and coercion, one issue per bad row
- **normalize**: timestamp resolution and the cancellation sign
- **reader**: CSV container -> raw records
"""

from pos_sales.ingest.fields import CANONICAL_FIELDS, FIELD_CANDIDATES, pick_field, project_record
from pos_sales.ingest.normalize import normalize_record, to_timestamp
from pos_sales.ingest.reader import read_sales_csv
from pos_sales.ingest.validation import normalize_status, validate_record

__all__ = [
    "CANONICAL_FIELDS",
    "FIELD_CANDIDATES",
    "normalize_record",
    "normalize_status",
    "pick_field",
    "project_record",
    "read_sales_csv",
    "to_timestamp",
    "validate_record",
]
