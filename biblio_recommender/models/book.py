"""
Book catalog models.

``Book`` is a catalog entry; ``Catalog`` is the read-only mapping from
``book_id`` to ``Book`` that every engine joins against. A loan whose
``book_id`` is missing from the catalog is dropped from aggregation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


class Book(BaseModel):
    """A catalog entry.

    Attributes:
        book_id: Catalog identifier (string; numeric source ids are coerced).
        title: Display title, also the primary tie-break key when ranking.
        category: Category label used for content affinity.
        total_loans: Historical total-loan count (popularity prior), if known.
        author: Optional author display name.
    """

    model_config = ConfigDict(frozen=True)

    book_id: str
    title: str
    category: str
    total_loans: Optional[int] = None
    author: Optional[str] = None

    @field_validator("book_id", mode="before")
    @classmethod
    def coerce_book_id(cls, v: object) -> object:
        if isinstance(v, (int, str)) and not isinstance(v, bool):
            return str(v).strip()
        return v

    @field_validator("book_id", "title", "category")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must be a non-empty string.")
        return v

    @field_validator("total_loans")
    @classmethod
    def validate_total_loans(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"total_loans must be >= 0, got {v}.")
        return v


Catalog = Mapping[str, Book]


def build_catalog(books: Iterable[Book]) -> dict[str, Book]:
    """Index books by ``book_id``.

    A repeated ``book_id`` replaces the earlier entry (last one wins) and is
    logged as a warning.
    """
    catalog: dict[str, Book] = {}
    for book in books:
        if book.book_id in catalog:
            logger.warning("Duplicate book_id %r in catalog; keeping last entry", book.book_id)
        catalog[book.book_id] = book
    return catalog
