"""
Content-based engine: per-member category affinity.

Profile
-------
For every book the member has borrowed (and that exists in the catalog),
count its category, then normalize the counts to weights summing to 1::

    weight(category) = loans_in_category / qualifying_loans

Scoring
-------
Every catalog book the member has NOT borrowed scores the weight of its
category. Books in categories the member never borrowed score 0 and are
left out entirely rather than ranked last.

Fallback
--------
No qualifying history, or no candidate with a positive score, returns
trending output over the whole ledger instead. The member's already-borrowed
books stay excluded in the fallback too, so it can come back empty.
"""

from __future__ import annotations

import logging
from collections import Counter
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


def borrowed_by(member_id: str, loans: Sequence[LoanRecord]) -> set[str]:
    """Return the exclusion set: every ``book_id`` the member has borrowed."""
    return {loan.book_id for loan in loans if loan.member_id == member_id}


def category_profile(
    member_id: str,
    loans:     Sequence[LoanRecord],
    catalog:   Catalog,
) -> dict[str, float]:
    """Normalized category histogram of the member's qualifying loans.

    Every loan event counts (borrowing the same book twice weighs its
    category twice). Loans of books missing from the catalog are ignored.

    Returns:
        ``category -> weight``, weights summing to 1; ``{}`` when the member
        has no qualifying loans.
    """
    histogram: Counter[str] = Counter()
    for loan in loans:
        if loan.member_id != member_id:
            continue
        book = catalog.get(loan.book_id)
        if book is not None:
            histogram[book.category] += 1

    total = sum(histogram.values())
    if total == 0:
        return {}
    return {category: count / total for category, count in histogram.items()}


def content_based(
    member_id:            str,
    loans:                Sequence[LoanRecord],
    catalog:              Catalog,
    limit:                int,
    as_of:                Optional[date] = None,
    fallback_window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[RecommendationEntry]:
    """Recommend unread books from the member's preferred categories.

    Args:
        member_id:            Member to recommend for (may be unknown).
        loans:                Loan ledger.
        catalog:              ``book_id -> Book``.
        limit:                Max entries returned.
        as_of:                Evaluation day for the trending fallback.
        fallback_window_days: Trending window used by the fallback.

    Returns:
        Entries tagged ``content`` scored by category weight, or trending
        fallback entries (see module docstring).
    """
    if limit <= 0:
        return []

    exclusion = borrowed_by(member_id, loans)
    profile = category_profile(member_id, loans, catalog)

    if not profile:
        return trending_fallback(
            loans, catalog, limit, as_of, fallback_window_days, exclusion,
            reason=f"member {member_id!r} has no qualifying loans",
        )

    scores: dict[str, float] = {}
    for book_id, book in catalog.items():
        if book_id in exclusion:
            continue
        weight = profile.get(book.category, 0.0)
        if weight > 0:
            scores[book_id] = weight

    if not scores:
        return trending_fallback(
            loans, catalog, limit, as_of, fallback_window_days, exclusion,
            reason=f"no unread books in categories of member {member_id!r}",
        )

    logger.debug(
        "Content profile for %r: %d categories, %d candidates",
        member_id, len(profile), len(scores),
    )
    return assemble(scores, catalog, limit, RecommendationSource.CONTENT, exclusion)
