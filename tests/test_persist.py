"""Tests for dataset and line documents."""

import json
from pathlib import Path

import pandas as pd
import pytest

from pos_sales.exceptions import DataQualityError
from pos_sales.sales.aggregate import aggregate
from pos_sales.sales.persist import (
    build_dataset_payload,
    line_records,
    rows_from_line_records,
    write_payload_json,
)
from tests.test_utils import make_row


@pytest.fixture
def rows() -> list:
    """Twelve items plus one cancellation."""
    items = [make_row(name=f"Item {i}", linetotal=100 * (i + 1)) for i in range(12)]
    items.append(make_row(name="Item 0", linetotal=50, status="CANCELLED", ts="2024-01-01T10:30:00Z"))
    return items


class TestDatasetPayload:
    def test_payload_fields(self, rows: list) -> None:
        payload = build_dataset_payload(rows, aggregate(rows), "sales.csv")
        assert payload["filename"] == "sales.csv"
        assert payload["rows"] == 13
        assert payload["sum_signed_total"] == sum(100 * (i + 1) for i in range(12)) - 50
        assert payload["sum_signed_qty"] == 11
        assert payload["cancelled_count"] == 1
        assert payload["cancelled_amount"] == 50
        assert len(payload["lines"]) == 13

    def test_snapshot_uses_fixed_limit(self, rows: list) -> None:
        snapshot = build_dataset_payload(rows, aggregate(rows), "sales.csv")["summary_snapshot"]
        assert len(snapshot["top_by_name"]) == 10
        assert snapshot["top_by_name"][0]["key"] == "Item 11"
        assert [e["key"] for e in snapshot["top_by_hour"]] == ["2024-01-01 09:00", "2024-01-01 10:00"]

    def test_custom_snapshot_limit(self, rows: list) -> None:
        payload = build_dataset_payload(rows, aggregate(rows), "sales.csv", snapshot_limit=3)
        assert len(payload["summary_snapshot"]["top_by_name"]) == 3

    def test_no_rows_to_save(self, rows: list) -> None:
        with pytest.raises(DataQualityError, match="No rows to save"):
            build_dataset_payload([], aggregate(rows), "sales.csv")

    def test_payload_is_json_serializable(self, rows: list, tmp_path: Path) -> None:
        payload = build_dataset_payload(rows, aggregate(rows), "sales.csv")
        path = write_payload_json(tmp_path / "out" / "payload.json", payload)
        loaded = json.loads(path.read_text(encoding="utf-8"))
        assert loaded["rows"] == 13
        assert loaded["lines"][0]["ts"] == "2024-01-01T09:00:00+00:00"


class TestLineRecords:
    def test_line_document(self) -> None:
        line = line_records([make_row(qty=2, linetotal=500, status="CANCELLED")])[0]
        assert line == {
            "ts": "2024-01-01T09:00:00+00:00",
            "name": "Burger",
            "qty": 2.0,
            "pricemode": "dine-in",
            "linetotal": 500.0,
            "status": "CANCELLED",
            "signed_qty": -2.0,
            "signed_total": -500.0,
        }

    def test_rows_are_rebuilt_oldest_first(self) -> None:
        late = make_row(name="Late", ts="2024-01-01T12:00:00Z")
        early = make_row(name="Early", ts="2024-01-01T08:00:00Z", status="CANCELLED")
        rebuilt = rows_from_line_records(line_records([late, early]))
        assert rebuilt == [early, late]

    def test_malformed_documents_are_skipped(self) -> None:
        good = line_records([make_row()])[0]
        documents = [
            {**good, "ts": None},
            {**good, "ts": "garbage"},
            {**good, "qty": "2"},
            {**good, "name": ""},
            {**good, "pricemode": None},
            good,
        ]
        rebuilt = rows_from_line_records(documents)
        assert len(rebuilt) == 1
        assert rebuilt[0].ts == pd.Timestamp("2024-01-01T09:00:00Z")

    def test_unknown_status_reads_as_ok(self) -> None:
        document = {**line_records([make_row()])[0], "status": "weird"}
        assert rows_from_line_records([document])[0].status == "OK"
