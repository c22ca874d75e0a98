"""
Collaborative engine: "members who borrowed this also borrowed ...".

    co_borrowers      = members with a loan of the query book
    strength(cand)    = |{m in co_borrowers : m borrowed cand}|

Strength counts distinct members, not loan events, so a single member who
borrows a candidate repeatedly adds only 1. The query book itself is never a
candidate.

When nobody has borrowed the query book, or the book is not in the catalog,
trending output (without the query book) is returned instead.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from typing import Optional

from biblio_recommender.models.book import Catalog
from biblio_recommender.models.loan import LoanRecord
from biblio_recommender.models.recommendation import (
    RecommendationEntry,
    RecommendationSource,
)
from biblio_recommender.recommendations.assembler import assemble
from biblio_recommender.recommendations.trending import (
    DEFAULT_WINDOW_DAYS,
    trending_fallback,
)

logger = logging.getLogger(__name__)


def co_borrowers(book_id: str, loans: Sequence[LoanRecord]) -> set[str]:
    """Members who have at least one loan of ``book_id``."""
    return {loan.member_id for loan in loans if loan.book_id == book_id}


def association_strengths(
    book_id: str,
    loans:   Sequence[LoanRecord],
    members: set[str],
) -> dict[str, int]:
    """Count distinct ``members`` per other book they borrowed."""
    borrowers: dict[str, set[str]] = defaultdict(set)
    for loan in loans:
        if loan.member_id in members and loan.book_id != book_id:
            borrowers[loan.book_id].add(loan.member_id)
    return {candidate: len(who) for candidate, who in borrowers.items()}


def collaborative(
    book_id:              str,
    loans:                Sequence[LoanRecord],
    catalog:              Catalog,
    limit:                int,
    as_of:                Optional[date] = None,
    fallback_window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[RecommendationEntry]:
    """Rank books by how many of ``book_id``'s borrowers also borrowed them.

    Args:
        book_id:              Query book (may be unknown).
        loans:                Loan ledger.
        catalog:              ``book_id -> Book``.
        limit:                Max entries returned.
        as_of:                Evaluation day for the trending fallback.
        fallback_window_days: Trending window used by the fallback.

    Returns:
        Entries tagged ``collaborative`` scored by distinct co-borrower
        count, or trending fallback entries.
    """
    if limit <= 0:
        return []

    members = co_borrowers(book_id, loans)
    if not members or book_id not in catalog:
        return trending_fallback(
            loans, catalog, limit, as_of, fallback_window_days, {book_id},
            reason=f"no co-borrowers for book {book_id!r}",
        )

    strengths = association_strengths(book_id, loans, members)
    logger.debug(
        "Book %r: %d co-borrowers, %d candidate books",
        book_id, len(members), len(strengths),
    )
    return assemble(
        strengths, catalog, limit, RecommendationSource.COLLABORATIVE, {book_id},
    )
