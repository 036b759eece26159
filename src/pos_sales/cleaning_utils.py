"""Shared utilities for cleaning POS export values.

Key utilities:
- Missing-value detection that understands pandas NaN/NaT
- Text cleaning: strip zero-width characters and surrounding whitespace
- Number parsing: grouping commas removed, finite values only

Examples:
    >>> from pos_sales.cleaning_utils import clean_text, parse_number
    >>> clean_text("\\ufeff Burger ")
    'Burger'
    >>> parse_number("1,200")
    1200.0
    >>> parse_number("abc") is None
    True
"""

from __future__ import annotations

import math
import numbers
import re
from typing import Any, Optional

import numpy as np
import pandas as pd

# Zero-width characters and the byte-order mark
ZW = "".join(chr(c) for c in (0x200B, 0x200C, 0x200D, 0xFEFF))

_ZW_RE = re.compile(r"[%s]" % re.escape(ZW))


def is_missing(x: Any) -> bool:
    """Return True for None, NaN and NaT.

    Examples:
        >>> is_missing(float("nan"))
        True
        >>> is_missing("")
        False
    """
    if x is None:
        return True
    if isinstance(x, (float, pd.Timestamp, np.datetime64)) or x is pd.NaT:
        return bool(pd.isna(x))
    return False


def is_real_number(x: Any) -> bool:
    """Return True for int/float values (numpy included), excluding booleans."""
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


def clean_text(x: Any) -> Optional[str]:
    """Strip zero-width characters and surrounding whitespace.

    Args:
        x: Value to clean (string, number, or None).

    Returns:
        Cleaned string, or None if the input is missing.

    Examples:
        >>> clean_text("  Hello\\u200b ")
        'Hello'
        >>> clean_text(None) is None
        True
    """
    if is_missing(x):
        return None
    return _ZW_RE.sub("", str(x)).strip()


def parse_number(s: str) -> Optional[float]:
    """Parse a numeric string after removing grouping commas.

    Only finite values are accepted. Underscore digit grouping, which
    Python's float() would allow, is rejected.

    Args:
        s: String to parse.

    Returns:
        Parsed float value or None if parsing fails.

    Examples:
        >>> parse_number("1,234.5")
        1234.5
        >>> parse_number("inf") is None
        True
    """
    cleaned = s.replace(",", "").strip()
    if not cleaned or "_" in cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
