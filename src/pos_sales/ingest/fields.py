"""Field resolution: map arbitrary export headers onto canonical fields.

POS exports name the same column in different ways ("qty", "quantity",
"units", ...). Each canonical field has an alias list scanned in priority
order; the first usable value wins.

Examples:
    >>> from pos_sales.ingest.fields import project_record
    >>> project_record({"item": " Burger ", "quantity": "2"})["name"]
    'Burger'
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pos_sales.cleaning_utils import clean_text, is_missing
from pos_sales.models import ProjectedRecord, RawRecord

DEFAULT_PRICEMODE = "UNKNOWN"

# Alias lists in priority order: earlier aliases win
FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    "ts": ("ts", "timestamp", "time", "date", "datetime", "createdAt"),
    "name": ("name", "menu", "item", "itemName", "product", "productName"),
    "qty": ("qty", "quantity", "count", "amount", "units"),
    "pricemode": ("pricemode", "priceMode", "price_mode", "mode", "pricing"),
    "linetotal": ("linetotal", "lineTotal", "line_total", "total", "totalPrice", "amountTotal"),
    "status": ("status", "state", "orderStatus", "fulfillmentStatus"),
}

CANONICAL_FIELDS = tuple(FIELD_CANDIDATES)


def pick_field(record: RawRecord, aliases: Sequence[str]) -> Any:
    """Return the first usable value among aliases, or None.

    None, NaN and blank strings are skipped. Strings come back trimmed;
    any other value is returned unchanged.

    Args:
        record: Raw input record.
        aliases: Keys to try, highest priority first.

    Returns:
        The resolved value, or None if no alias holds one.

    """
    for key in aliases:
        if key not in record:
            continue
        candidate = record[key]
        if is_missing(candidate):
            continue
        if isinstance(candidate, str):
            trimmed = clean_text(candidate)
            if not trimmed:
                continue
            return trimmed
        return candidate
    return None


def project_record(record: RawRecord) -> ProjectedRecord:
    """Project a raw record onto the six canonical fields.

    Missing fields are left as None for the validator to report, except
    pricemode which defaults to "UNKNOWN".
    """
    projected = {name: pick_field(record, aliases) for name, aliases in FIELD_CANDIDATES.items()}
    if projected["pricemode"] is None:
        projected["pricemode"] = DEFAULT_PRICEMODE
    return projected
