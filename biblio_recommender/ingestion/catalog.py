"""
Book catalog parser (CSV or JSON).

CSV format — comma delimited, header row required.
Required columns:
  book_id, title, category

Optional columns (empty string → None):
  total_loans, author

JSON format — an array of objects; ``id`` / ``totalLoans`` are accepted as
aliases for ``book_id`` / ``total_loans``.

Unlike the ledger, the catalog is strict: every row is validated before any
is returned, and a single :class:`ValueError` lists the first 10 failures.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from biblio_recommender.ingestion._fields import opt_str, parse_opt_int, req_str
from biblio_recommender.models.book import Book, build_catalog

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({"book_id", "title", "category"})


def load_catalog(path: Path) -> dict[str, Book]:
    """Parse a catalog file, choosing the parser by file extension.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On an unsupported extension or any invalid row.
    """
    fmt = path.suffix.lower()
    if fmt == ".csv":
        return parse_catalog_csv(path)
    if fmt == ".json":
        return parse_catalog_json(path)
    raise ValueError(f"Unsupported catalog format '{fmt}'. Use .csv or .json.")


def parse_catalog_csv(path: Path) -> dict[str, Book]:
    """Parse a CSV catalog into a ``book_id -> Book`` mapping.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If required columns are missing or any row fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames}
        missing = REQUIRED_CSV_COLUMNS - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        rows = [
            {(k or "").strip(): v for k, v in row.items()}
            for row in reader
        ]

    # Line numbers are 1-based and skip the header row.
    return _rows_to_catalog(rows, path, first_line=2)


def parse_catalog_json(path: Path) -> dict[str, Book]:
    """Parse a JSON array of book objects into a ``book_id -> Book`` mapping.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a JSON array or any entry is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Catalog JSON parse error in {path.name}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValueError(f"Catalog JSON must contain an array: {path}")

    return _rows_to_catalog(raw, path, first_line=0)


# ── Private helpers ────────────────────────────────────────────────────────────

def _rows_to_catalog(
    rows:       list[Any],
    path:       Path,
    first_line: int,
) -> dict[str, Book]:
    if not rows:
        logger.warning("Catalog is empty: %s", path)
        return {}

    books: list[Book] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        line_no = i + first_line
        if not isinstance(row, dict):
            errors.append((line_no, "entry is not an object"))
            continue
        try:
            books.append(row_to_book(row))
        except (ValueError, ValidationError) as exc:
            errors.append((line_no, str(exc)))

    if errors:
        max_shown = 10
        label = "Row " if first_line else "Entry #"
        detail = "\n".join(f"  {label}{ln}: {msg}" for ln, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    catalog = build_catalog(books)
    logger.info("Parsed %d books from %s", len(catalog), path.name)
    return catalog


def row_to_book(row: dict[str, Any]) -> Book:
    """Convert one raw catalog row to a validated :class:`Book`.

    Raises:
        ValueError: On a missing required field or a non-integer total_loans.
        pydantic.ValidationError: On model-level validation failure.
    """
    return Book(
        book_id=req_str(row, "book_id", "id"),
        title=req_str(row, "title"),
        category=req_str(row, "category"),
        total_loans=parse_opt_int(row, "total_loans", "totalLoans"),
        author=opt_str(row, "author"),
    )
