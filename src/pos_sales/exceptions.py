"""Domain-specific exceptions for POS sales ingestion.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from SalesIngestError for easy catching.

Per-row validation problems are not exceptions: they are reported as
ParseIssue entries on the batch result and never abort a batch.
"""


class SalesIngestError(Exception):
    """Base exception for all POS sales ingestion errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(SalesIngestError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - A limit is not a positive integer
    - The configured timezone cannot be resolved
    """

    pass


class DataQualityError(SalesIngestError):
    """Raised when input data cannot be used for the requested step.

    This exception is raised when:
    - An empty row set is aggregated or persisted
    - A record handed to the batch driver is not a mapping
    """

    pass


class BatchLimitError(DataQualityError):
    """Raised when a batch holds more accepted rows than the row cap.

    This is a whole-batch failure: nothing from the batch is aggregated.

    Attributes:
        row_count: Number of accepted rows in the batch.
        max_rows: The row cap that was exceeded.
    """

    def __init__(self, row_count: int, max_rows: int) -> None:
        super().__init__(f"Rows exceed maximum allowed ({max_rows}): got {row_count}")
        self.row_count = row_count
        self.max_rows = max_rows


class SourceFormatError(SalesIngestError):
    """Raised when a source file cannot be split into rows.

    This exception is raised when:
    - The CSV parser fails on the container itself
    - The file is empty or has no header
    - The bytes cannot be decoded with the requested encoding
    """

    pass
