"""
Recommendation output model.

Every engine returns the same ``RecommendationEntry`` shape. The meaning of
``score`` depends on ``source``:

  trending       raw loan count inside the trending window
  content        member's category weight (0 < score <= 1)
  collaborative  number of distinct co-borrowers

Content-based and collaborative calls that fall back to trending return
entries tagged ``trending``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class RecommendationSource(StrEnum):
    """Which engine produced an entry."""

    TRENDING = "trending"
    CONTENT = "content"
    COLLABORATIVE = "collaborative"


class RecommendationEntry(BaseModel):
    """One ranked recommendation.

    Attributes:
        book_id: Catalog identifier.
        title: Catalog title.
        category: Catalog category label.
        score: Non-negative engine score (see module docstring).
        rank: 1-based position after sorting.
        source: Engine that produced the entry.
    """

    model_config = ConfigDict(frozen=True)

    book_id: str
    title: str
    category: str
    score: float
    rank: int
    source: RecommendationSource

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"score must be non-negative, got {v}.")
        return v

    @field_validator("rank")
    @classmethod
    def validate_rank(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"rank must be >= 1, got {v}.")
        return v
