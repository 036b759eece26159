"""Example: Summarize a POS sales export

This example demonstrates how to process one exported CSV as a batch and
look at the result at different levels (counts and issues, headline
figures, breakdown panels, hourly series).

Prerequisites:
- A CSV export with a header row (column names may vary, e.g. "quantity"
  instead of "qty", "orderStatus" instead of "status")
"""

from pathlib import Path

from pos_sales import IngestConfig
from pos_sales.sales import process_csv
from pos_sales.sales.summary import breakdown_tables, compute_kpis, entries_frame, hourly_frame

csv_path = Path("data/exports/sales.csv")  # MODIFY AS NEEDED

# Hour buckets are cut in the shop's local timezone
config = IngestConfig(timezone="Asia/Tokyo")

print(f"Processing {csv_path}...")
result = process_csv(csv_path, config)

print(f"Rows: {result.total_row_count}  valid: {result.valid_row_count}  invalid: {result.invalid_row_count}")
for issue in result.display_issues(config.issue_display_limit):
    print(f"  row {issue.index}: {issue.message}")

if not result.ok:
    print(f"Batch rejected: {result.error}")
elif result.summary is None:
    print("No valid rows.")
else:
    kpis = compute_kpis(result.summary, result.rows)
    print(f"\nNet sales: {kpis.net_sales:,.0f}  (gross {kpis.gross_sales:,.0f})")
    print(f"Cancelled: {kpis.cancelled_count} lines, {kpis.cancelled_amount:,.0f}")
    print(f"Cancellation rate: {kpis.cancellation_rate:.1%}")

    tables = breakdown_tables(result.summary)
    print("\nTop items:")
    print(entries_frame(tables["name"]).to_string(index=False))

    print("\nHourly series:")
    print(hourly_frame(result.summary).to_string(index=False))
