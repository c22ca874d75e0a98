"""
Recommendation report writer: CSV and JSON output for ranked lists.

All functions are pure I/O. They consume in-memory ``RecommendationEntry``
lists (already ranked by an engine) and write human-readable +
machine-readable files.

Output files (written by the CLI when ``--output-dir`` is given)
----------------------------------------------------------------
  {output_dir}/
    recommendations_{label}_{date}.csv
    recommendations_{label}_{date}.json
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional

from biblio_recommender.models.recommendation import RecommendationEntry

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1"

CSV_FIELDNAMES = ["rank", "book_id", "title", "category", "score", "source"]


def _report_path(output_dir: Path, label: str, run_date: date, suffix: str) -> Path:
    safe_label = "".join(c if c.isalnum() or c in "-_" else "-" for c in label)
    return output_dir / f"recommendations_{safe_label}_{run_date}{suffix}"


def write_recommendations_csv(
    entries:    list[RecommendationEntry],
    output_dir: Path,
    label:      str,
    run_date:   date | None = None,
) -> Path:
    """Write ranked entries to a CSV file.

    Columns: rank, book_id, title, category, score, source.

    Args:
        entries:    Engine output, already in rank order.
        output_dir: Directory to write the file (created if missing).
        label:      Report label used in the filename (e.g. ``"trending"``).
        run_date:   Date label for the filename. Defaults to today.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = _report_path(output_dir, label, run_date, ".csv")

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        writer.writeheader()
        for entry in sorted(entries, key=lambda e: e.rank):
            writer.writerow(
                {
                    "rank":     entry.rank,
                    "book_id":  entry.book_id,
                    "title":    entry.title,
                    "category": entry.category,
                    "score":    round(entry.score, 4),
                    "source":   entry.source.value,
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(entries))
    return csv_path


def write_recommendations_json(
    entries:    list[RecommendationEntry],
    output_dir: Path,
    label:      str,
    run_date:   date | None = None,
    params:     Optional[dict[str, Any]] = None,
) -> Path:
    """Write ranked entries to a structured JSON file.

    Args:
        entries:    Engine output, already in rank order.
        output_dir: Target directory.
        label:      Used in filename + metadata.
        run_date:   Date label. Defaults to today.
        params:     Engine parameters recorded for provenance
                    (window, limit, member/book id, as_of).

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = _report_path(output_dir, label, run_date, ".json")

    payload: dict = {
        "schema_version": SCHEMA_VERSION,
        "label":          label,
        "generated_at":   run_date.isoformat(),
        "params":         params or {},
        "entries":        [entry.model_dump(mode="json") for entry in entries],
    }

    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path
