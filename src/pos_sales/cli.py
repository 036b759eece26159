"""Command-line tool: summarize a POS sales CSV export.

Examples:
    $ pos-sales exports/sales.csv
    $ pos-sales exports/sales.csv --timezone Asia/Tokyo --issue-limit 50
    $ pos-sales exports/sales.csv --output out/sales_summary.json -v
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pos_sales.config import BREAKDOWN_LIMITS, ISSUE_DISPLAY_LIMIT, IngestConfig
from pos_sales.exceptions import ConfigError, SourceFormatError
from pos_sales.sales.api import process_csv
from pos_sales.sales.persist import build_dataset_payload, write_payload_json
from pos_sales.sales.summary import breakdown_tables, compute_kpis

_TITLES = {"name": "By item", "pricemode": "By price mode", "hour": "By hour"}


def main(argv: list[str] | None = None) -> None:
    """Execute the summarize command.

    Reads the CSV, prints row counts, the first issues, headline figures
    and the breakdown tables, and optionally writes the dataset payload.

    Exits with code 1 if the file cannot be parsed, the batch is rejected,
    or no valid rows remain; 0 otherwise.
    """
    parser = argparse.ArgumentParser(description="Summarize a POS sales CSV export.")
    parser.add_argument("csv_path", help="Path to the CSV export")
    parser.add_argument(
        "--timezone",
        default=None,
        help="Timezone for hour buckets (default: POS_SALES_TIMEZONE or UTC)",
    )
    parser.add_argument(
        "--issue-limit",
        type=int,
        default=None,
        help=f"Number of row issues to print (default: {ISSUE_DISPLAY_LIMIT})",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the dataset payload (summary snapshot + lines) to this JSON file",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = IngestConfig.from_env()
        if args.timezone or args.issue_limit is not None:
            config = IngestConfig(
                max_rows=config.max_rows,
                issue_display_limit=(
                    args.issue_limit if args.issue_limit is not None else config.issue_display_limit
                ),
                snapshot_limit=config.snapshot_limit,
                timezone=args.timezone or config.timezone,
            )
    except ConfigError as e:
        print(f"Configuration error: {e}")
        raise SystemExit(1) from e

    csv_path = Path(args.csv_path)
    try:
        result = process_csv(csv_path, config)
    except (FileNotFoundError, SourceFormatError) as e:
        print(f"Could not read {csv_path}: {e}")
        raise SystemExit(1) from e

    print(f"File        : {csv_path}")
    print(f"Rows        : {result.total_row_count}")
    print(f"Valid       : {result.valid_row_count}")
    print(f"Invalid     : {result.invalid_row_count}")

    shown = result.display_issues(config.issue_display_limit)
    if shown:
        print(f"\nIssues (showing {len(shown)} of {result.invalid_row_count}):")
        for issue in shown:
            print(f"  row {issue.index}: {issue.message}")

    if not result.ok:
        print(f"\nBatch rejected: {result.error}")
        raise SystemExit(1)

    if result.summary is None:
        print("\nNo valid rows to summarize.")
        raise SystemExit(1)

    kpis = compute_kpis(result.summary, result.rows)
    print("\nSummary:")
    print(f"  net sales        : {kpis.net_sales:,.2f}")
    print(f"  gross sales      : {kpis.gross_sales:,.2f}")
    print(f"  net quantity     : {kpis.net_qty:,.2f}")
    print(f"  cancelled        : {kpis.cancelled_count} ({kpis.cancelled_amount:,.2f})")
    print(f"  cancellation rate: {kpis.cancellation_rate:.1%}")
    print(f"  average per line : {kpis.average_per_line:,.2f}")
    print(f"  unique items     : {kpis.unique_items}")

    for dimension, entries in breakdown_tables(result.summary, BREAKDOWN_LIMITS).items():
        print(f"\n{_TITLES[dimension]} (top {len(entries)}):")
        for entry in entries:
            print(
                f"  {entry.key:<24} {entry.signed_total:>14,.2f} "
                f"{entry.signed_qty:>10,.2f} {entry.count:>6}"
            )

    if args.output:
        payload = build_dataset_payload(
            result.rows,
            result.summary,
            filename=csv_path.name,
            snapshot_limit=config.snapshot_limit,
        )
        out_path = write_payload_json(args.output, payload)
        print(f"\nPayload written to {out_path}")

    raise SystemExit(0)


if __name__ == "__main__":
    main()
