"""
ASCII terminal formatters for CLI output.

Formatters accept ``RecommendationEntry`` lists and return plain multi-line
strings suitable for ``typer.echo()``. No third-party dependencies.

Example::

  === Trending (last 7 days) ===
    Rank  Title                           Category          Score  Source
    ---------------------------------------------------------------------
       1  Alpha                           Fiction               2  trending
"""

from __future__ import annotations

from biblio_recommender.models.recommendation import (
    RecommendationEntry,
    RecommendationSource,
)

_TITLE_WIDTH = 30
_CATEGORY_WIDTH = 16


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def format_score(entry: RecommendationEntry) -> str:
    """Counts print as integers; affinity weights as percentages."""
    if entry.source == RecommendationSource.CONTENT:
        return f"{entry.score:.0%}"
    if entry.score == int(entry.score):
        return str(int(entry.score))
    return f"{entry.score:.2f}"


def format_recommendation_table(
    entries: list[RecommendationEntry],
    heading: str,
) -> str:
    """Format a ranked list as an ASCII table.

    Args:
        entries: Engine output in rank order.
        heading: Title line shown above the table.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {heading} ===")

    if not entries:
        lines.append("  (no recommendations)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Title':<{_TITLE_WIDTH}}  {'Category':<{_CATEGORY_WIDTH}}  "
        f"{'Score':>6}  Source"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for entry in entries:
        lines.append(
            f"  {entry.rank:>4}  {_truncate(entry.title, _TITLE_WIDTH):<{_TITLE_WIDTH}}  "
            f"{_truncate(entry.category, _CATEGORY_WIDTH):<{_CATEGORY_WIDTH}}  "
            f"{format_score(entry):>6}  {entry.source.value}"
        )

    return "\n".join(lines)
