"""
Loan ledger parser (CSV or JSON).

CSV format — comma delimited, header row required.
Required columns:
  book_id, member_id, loan_date

Optional columns (empty string → None / False):
  loan_id, return_date, is_late

JSON format — an array of objects with the same keys. The dashboard's
camelCase keys (``bookId``, ``memberId``, ``loanDate``, ``returnDate``,
``isLate``, ``id``) are accepted too.

The ledger is lenient, since the recommendation engines must keep working on
partially inconsistent data:
  - a row without ``book_id`` or ``member_id`` is skipped with a warning;
  - an unparsable ``loan_date`` is kept as ``None`` with a warning, so the
    loan still counts for member/book associations but never for trending;
  - an unparsable ``return_date`` or ``is_late`` is treated as absent.

Loans referencing books missing from the catalog are NOT filtered here —
the engines drop them during aggregation.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from biblio_recommender.ingestion._fields import opt_str, parse_bool
from biblio_recommender.models.loan import LoanRecord
from biblio_recommender.utils.time_utils import parse_date

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({"book_id", "member_id", "loan_date"})


def load_ledger(path: Path) -> list[LoanRecord]:
    """Parse a ledger file, choosing the parser by file extension.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On an unsupported extension or malformed file structure.
    """
    fmt = path.suffix.lower()
    if fmt == ".csv":
        return parse_ledger_csv(path)
    if fmt == ".json":
        return parse_ledger_json(path)
    raise ValueError(f"Unsupported ledger format '{fmt}'. Use .csv or .json.")


def parse_ledger_csv(path: Path) -> list[LoanRecord]:
    """Parse a CSV loan ledger into :class:`LoanRecord` objects.

    Args:
        path: Path to the CSV file (must exist).

    Returns:
        Loan records in file order (invalid rows skipped).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the header row is missing or lacks required columns.
    """
    if not path.exists():
        raise FileNotFoundError(f"Ledger file not found: {path}")

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

    return _rows_to_loans(rows, path)


def parse_ledger_json(path: Path) -> list[LoanRecord]:
    """Parse a JSON array of loan objects into :class:`LoanRecord` objects.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid JSON or not an array.
    """
    if not path.exists():
        raise FileNotFoundError(f"Ledger file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Ledger JSON parse error in {path.name}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValueError(f"Ledger JSON must contain an array: {path}")

    rows: list[dict[str, Any]] = []
    for i, item in enumerate(raw):
        if isinstance(item, dict):
            rows.append(item)
        else:
            logger.warning("Ledger entry #%d is not an object; skipped", i)

    return _rows_to_loans(rows, path)


# ── Private helpers ────────────────────────────────────────────────────────────

def _rows_to_loans(rows: list[dict[str, Any]], path: Path) -> list[LoanRecord]:
    if not rows:
        logger.warning("Ledger is empty: %s", path)
        return []

    loans: list[LoanRecord] = []
    skipped = 0
    undated = 0

    for i, row in enumerate(rows):
        loan = row_to_loan(row, position=i + 1)
        if loan is None:
            skipped += 1
            continue
        if loan.loan_date is None:
            undated += 1
        loans.append(loan)

    logger.info(
        "Parsed %d loans from %s (%d skipped, %d without a usable loan_date)",
        len(loans), path.name, skipped, undated,
    )
    return loans


def row_to_loan(row: dict[str, Any], position: int = 0) -> Optional[LoanRecord]:
    """Convert one raw ledger row to a :class:`LoanRecord`.

    Returns ``None`` (and logs a warning) when the row lacks a book or member
    identifier; never raises for bad dates or flags.
    """
    raw_loan_date = row.get("loan_date", row.get("loanDate"))
    loan_date = parse_date(raw_loan_date)
    if loan_date is None:
        logger.warning(
            "Ledger row %d: unparsable loan_date %r; excluded from trending windows",
            position, raw_loan_date,
        )

    try:
        is_late = parse_bool(row, "is_late", "isLate")
    except ValueError:
        is_late = False

    try:
        return LoanRecord(
            book_id=opt_str(row, "book_id", "bookId") or "",
            member_id=opt_str(row, "member_id", "memberId") or "",
            loan_date=loan_date,
            return_date=parse_date(row.get("return_date", row.get("returnDate"))),
            is_late=is_late,
            loan_id=opt_str(row, "loan_id", "id"),
        )
    except ValidationError as exc:
        logger.warning(
            "Ledger row %d skipped: %s",
            position, "; ".join(e["msg"] for e in exc.errors()),
        )
        return None
