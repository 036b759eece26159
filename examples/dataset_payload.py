"""Example: Build the dataset document for a storage layer

This example processes an export and writes the document a persistence
layer would store: totals, cancellation figures, the top-10 summary
snapshot, and one line document per accepted row. It then rebuilds the
rows from the stored lines and re-aggregates them.
"""

from pathlib import Path

from pos_sales.sales import aggregate, process_csv
from pos_sales.sales.persist import build_dataset_payload, rows_from_line_records, write_payload_json

csv_path = Path("data/exports/sales.csv")  # MODIFY AS NEEDED
out_path = Path("data/datasets/sales_payload.json")

result = process_csv(csv_path)
if not result.ok or result.summary is None:
    raise SystemExit(f"Nothing to save: {result.error or 'no valid rows'}")

payload = build_dataset_payload(result.rows, result.summary, filename=csv_path.name)
write_payload_json(out_path, payload)
print(f"Saved {payload['rows']} line(s) to {out_path}")

# Loading back: rows come out oldest first and aggregate to the same totals
restored = rows_from_line_records(payload["lines"])
print(f"Restored total: {aggregate(restored).total}")
