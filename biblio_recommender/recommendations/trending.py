"""
Trending engine: time-windowed loan frequency.

    score(book) = number of loans of ``book`` with
                  as_of - window_days <= loan_date <= as_of

Loans with an unknown ``loan_date`` never count. ``window_days <= 0`` is an
empty window and yields ``[]``. The content-based and collaborative engines
fall back to this engine (with ``DEFAULT_WINDOW_DAYS``) when they have no
signal for their query key.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Collection, Sequence
from datetime import date
from typing import Optional

from biblio_recommender.models.book import Catalog
from biblio_recommender.models.loan import LoanRecord
from biblio_recommender.models.recommendation import (
    RecommendationEntry,
    RecommendationSource,
)
from biblio_recommender.recommendations.assembler import assemble
from biblio_recommender.utils.time_utils import in_window, today_utc, window_bounds

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7


def trending(
    loans:       Sequence[LoanRecord],
    catalog:     Catalog,
    window_days: int,
    limit:       int,
    as_of:       Optional[date] = None,
    exclude:     Collection[str] = (),
) -> list[RecommendationEntry]:
    """Rank books by loan count within the trailing window.

    Args:
        loans:       Loan ledger.
        catalog:     ``book_id -> Book``; loans of unknown books are dropped.
        window_days: Window length in days.
        limit:       Max entries returned.
        as_of:       Last day of the window. Defaults to today (UTC).
        exclude:     ``book_id`` values to leave out (used by fallbacks).

    Returns:
        Entries tagged ``trending`` with the raw count as ``score``.
    """
    if window_days <= 0 or limit <= 0:
        return []

    start, end = window_bounds(as_of or today_utc(), window_days)

    counts: Counter[str] = Counter(
        loan.book_id
        for loan in loans
        if in_window(loan.loan_date, start, end) and loan.book_id in catalog
    )
    logger.debug(
        "Trending window %s..%s: %d loans over %d books",
        start, end, sum(counts.values()), len(counts),
    )

    return assemble(counts, catalog, limit, RecommendationSource.TRENDING, exclude)


def trending_fallback(
    loans:       Sequence[LoanRecord],
    catalog:     Catalog,
    limit:       int,
    as_of:       Optional[date],
    window_days: int,
    exclude:     Collection[str],
    reason:      str,
) -> list[RecommendationEntry]:
    """Trending output substituted when a targeted engine has no signal.

    ``exclude`` is applied before truncation, so excluded books never take up
    a slot; the result may be empty when every trending book is excluded.
    """
    logger.debug("Falling back to trending (%s)", reason)
    return trending(loans, catalog, window_days, limit, as_of=as_of, exclude=exclude)
