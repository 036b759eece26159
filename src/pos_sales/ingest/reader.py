"""Read a POS sales CSV export into raw records.

Every cell is read as text with no NA inference, so the field resolver and
validator see exactly what the export contains. Header names are cleaned of
surrounding whitespace and zero-width characters (a BOM on the first header
is common in spreadsheet exports).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

import pandas as pd

from pos_sales.cleaning_utils import clean_text
from pos_sales.exceptions import SourceFormatError

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO[str], IO[bytes]]


def read_sales_csv(source: CsvSource, encoding: str = "utf-8-sig") -> list[dict[str, str]]:
    """Split a CSV export into one raw record per data line.

    Args:
        source: Path or open file handle.
        encoding: Text encoding of the file.

    Returns:
        List of header-keyed records in file order.

    Raises:
        FileNotFoundError: If source is a path that does not exist.
        SourceFormatError: If the file cannot be parsed as a CSV table.

    """
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError as e:
        raise SourceFormatError(f"CSV file is empty: {source}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise SourceFormatError(f"CSV parsing failed: {e}") from e

    # pandas turns surplus leading fields into an index when every data line
    # has more fields than the header
    if len(df.index) and not isinstance(df.index, pd.RangeIndex):
        raise SourceFormatError(
            f"CSV parsing failed: data lines have more fields than the header ({len(df.columns)})"
        )

    df.columns = [clean_text(c) or "" for c in df.columns]
    records = df.to_dict(orient="records")
    logger.info("Read %d record(s) from %s", len(records), getattr(source, "name", source))
    return records
