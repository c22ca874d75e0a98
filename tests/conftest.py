"""
Shared pytest fixtures for the biblio-recommender test suite.

Provides:
  - ``as_of``: fixed evaluation day so window tests never depend on the clock.
  - ``scenario_catalog`` / ``scenario_loans``: the two-book, two-member
    ledger used throughout the engine tests::

        B1 "Alpha" (X)   borrowed by M1 (as_of-3), M2 (as_of-2)
        B2 "Beta"  (Y)   borrowed by M1 (as_of-1)

  - ``library_catalog`` / ``library_loans``: a larger ledger with several
    categories, repeat borrowers, an unknown book id and an undated loan.
  - ``make_loan`` / ``make_book``: factories for ad hoc records.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from biblio_recommender.models.book import Book, build_catalog
from biblio_recommender.models.loan import LoanRecord

AS_OF = date(2025, 3, 15)


def loan(book_id: str, member_id: str, days_ago: int | None, **kwargs) -> LoanRecord:
    """Build a LoanRecord dated ``days_ago`` days before ``AS_OF``."""
    loan_date = None if days_ago is None else AS_OF - timedelta(days=days_ago)
    return LoanRecord(book_id=book_id, member_id=member_id, loan_date=loan_date, **kwargs)


def book(book_id: str, title: str, category: str, **kwargs) -> Book:
    return Book(book_id=book_id, title=title, category=category, **kwargs)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_loan():
    return loan


@pytest.fixture
def make_book():
    return book


# ── Scenario ledger ───────────────────────────────────────────────────────────

@pytest.fixture
def scenario_catalog() -> dict[str, Book]:
    return build_catalog([
        book("B1", "Alpha", "X"),
        book("B2", "Beta", "Y"),
    ])


@pytest.fixture
def scenario_loans() -> list[LoanRecord]:
    return [
        loan("B1", "M1", 3),
        loan("B1", "M2", 2),
        loan("B2", "M1", 1),
    ]


# ── Larger library ────────────────────────────────────────────────────────────

@pytest.fixture
def library_catalog() -> dict[str, Book]:
    return build_catalog([
        book("F1", "Dune", "Fiction", total_loans=120),
        book("F2", "Emma", "Fiction", total_loans=40),
        book("F3", "Beloved", "Fiction"),
        book("S1", "Cosmos", "Science", total_loans=75),
        book("S2", "Atlas of Cells", "Science"),
        book("H1", "SPQR", "History"),
    ])


@pytest.fixture
def library_loans() -> list[LoanRecord]:
    return [
        loan("F1", "M1", 1),
        loan("F1", "M2", 2),
        loan("F1", "M3", 3),
        loan("S1", "M1", 4),
        loan("S1", "M1", 5),      # repeat borrower
        loan("F2", "M2", 6),
        loan("S2", "M2", 30),     # outside a 7-day window
        loan("H1", "M3", 2),
        loan("ZZ", "M1", 1),      # not in catalog
        loan("F3", "M4", None),   # unparsable date at ingestion
    ]
