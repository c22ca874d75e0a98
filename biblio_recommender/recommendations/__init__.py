"""
Recommendation engine: three pure derivations over a loan ledger and a
book catalog, plus the shared assembler and file reporters.

Modules
-------
assembler      assemble() — catalog join, deterministic sort, truncation, rank.
trending       trending() — time-windowed loan frequency.
content        content_based() — per-member category affinity.
collaborative  collaborative() — distinct co-borrower co-occurrence.
reporter       write_recommendations_csv() + write_recommendations_json().

Engines are synchronous and side-effect free: same inputs, same ordered output.
"""

from biblio_recommender.recommendations.collaborative import collaborative
from biblio_recommender.recommendations.content import content_based
from biblio_recommender.recommendations.trending import DEFAULT_WINDOW_DAYS, trending

__all__ = ["DEFAULT_WINDOW_DAYS", "collaborative", "content_based", "trending"]
