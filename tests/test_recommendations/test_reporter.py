"""
Tests for biblio_recommender/recommendations/reporter.py.

What we test
------------
- CSV has a header row plus one row per entry, in rank order.
- JSON payload carries schema_version, label, params and entries.
- Empty entry lists still produce valid files.
- Output directory is created if missing; labels are filename-safe.
"""

from __future__ import annotations

import csv
import json
from datetime import date

from biblio_recommender.recommendations.reporter import (
    CSV_FIELDNAMES,
    SCHEMA_VERSION,
    write_recommendations_csv,
    write_recommendations_json,
)
from biblio_recommender.recommendations.trending import trending

RUN_DATE = date(2025, 3, 15)


def _entries(library_loans, library_catalog, as_of):
    return trending(library_loans, library_catalog, 7, 10, as_of=as_of)


class TestCsv:
    def test_writes_rows_in_rank_order(self, tmp_path, library_loans, library_catalog, as_of):
        entries = _entries(library_loans, library_catalog, as_of)
        path = write_recommendations_csv(entries, tmp_path, "trending", run_date=RUN_DATE)

        assert path.name == "recommendations_trending_2025-03-15.csv"
        with path.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_FIELDNAMES
            rows = list(reader)

        assert [r["book_id"] for r in rows] == ["F1", "S1", "F2", "H1"]
        assert rows[0]["rank"] == "1"
        assert rows[0]["source"] == "trending"

    def test_creates_output_dir(self, tmp_path):
        out = tmp_path / "nested" / "dir"
        path = write_recommendations_csv([], out, "trending", run_date=RUN_DATE)
        assert path.exists()
        assert path.read_text(encoding="utf-8").strip() == ",".join(CSV_FIELDNAMES)

    def test_label_is_filename_safe(self, tmp_path):
        path = write_recommendations_csv([], tmp_path, "member/../x y", run_date=RUN_DATE)
        assert path.parent == tmp_path
        assert "/" not in path.name and " " not in path.name


class TestJson:
    def test_payload_structure(self, tmp_path, library_loans, library_catalog, as_of):
        entries = _entries(library_loans, library_catalog, as_of)
        path = write_recommendations_json(
            entries, tmp_path, "trending", run_date=RUN_DATE,
            params={"window_days": 7, "as_of": as_of},
        )
        payload = json.loads(path.read_text(encoding="utf-8"))

        assert payload["schema_version"] == SCHEMA_VERSION
        assert payload["label"] == "trending"
        assert payload["generated_at"] == "2025-03-15"
        assert payload["params"] == {"window_days": 7, "as_of": "2025-03-15"}
        assert len(payload["entries"]) == 4
        first = payload["entries"][0]
        assert first["book_id"] == "F1"
        assert first["rank"] == 1
        assert first["score"] == 3.0
        assert first["source"] == "trending"

    def test_empty_entries(self, tmp_path):
        path = write_recommendations_json([], tmp_path, "empty", run_date=RUN_DATE)
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["entries"] == []
        assert payload["params"] == {}
