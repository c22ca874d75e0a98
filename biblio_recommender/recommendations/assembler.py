"""
Shared join/shape step for all recommendation engines.

Each engine reduces the ledger to a ``book_id -> score`` mapping and hands
it to :func:`assemble`, which:

1. drops ids absent from the catalog or listed in ``exclude``;
2. sorts by score descending, then title ascending, then ``book_id``
   ascending (a total order, so output is reproducible);
3. truncates to ``limit`` (``limit <= 0`` yields ``[]``);
4. attaches 1-based ranks.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping

from biblio_recommender.models.book import Book, Catalog
from biblio_recommender.models.recommendation import (
    RecommendationEntry,
    RecommendationSource,
)


def sort_key(book: Book, score: float) -> tuple[float, str, str]:
    """Ordering key: score descending, then title, then book_id."""
    return (-score, book.title, book.book_id)


def assemble(
    scores:  Mapping[str, float],
    catalog: Catalog,
    limit:   int,
    source:  RecommendationSource,
    exclude: Collection[str] = (),
) -> list[RecommendationEntry]:
    """Join scored ids against the catalog and build ranked entries.

    Args:
        scores:  ``book_id -> score``. Negative scores are dropped.
        catalog: ``book_id -> Book``.
        limit:   Max entries returned.
        source:  Engine tag stamped on every entry.
        exclude: ``book_id`` values that must not appear in the output.

    Returns:
        Ranked list of ``RecommendationEntry``, at most ``limit`` long.
    """
    if limit <= 0:
        return []

    candidates: list[tuple[Book, float]] = []
    for book_id, score in scores.items():
        if book_id in exclude or score < 0:
            continue
        book = catalog.get(book_id)
        if book is None:
            continue
        candidates.append((book, float(score)))

    candidates.sort(key=lambda pair: sort_key(*pair))

    return [
        RecommendationEntry(
            book_id=book.book_id,
            title=book.title,
            category=book.category,
            score=score,
            rank=rank,
            source=source,
        )
        for rank, (book, score) in enumerate(candidates[:limit], start=1)
    ]
