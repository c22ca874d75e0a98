"""
Tests for biblio_recommender/recommendations/trending.py.

What we test
------------
- Counts loans per book inside the trailing window; unknown books dropped.
- Window is inclusive at both ends; loans without a date never count.
- window_days <= 0 and limit <= 0 yield [] without raising.
- Ties broken by title ascending, then book_id ascending.
- Output is deterministic and tagged ``trending``.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from biblio_recommender.ingestion.ledger import row_to_loan
from biblio_recommender.models.recommendation import RecommendationSource
from biblio_recommender.recommendations.trending import DEFAULT_WINDOW_DAYS, trending


class TestScenario:
    def test_counts_and_ranks(self, scenario_loans, scenario_catalog, as_of):
        result = trending(scenario_loans, scenario_catalog, 7, 2, as_of=as_of)
        assert [(e.book_id, e.score, e.rank) for e in result] == [
            ("B1", 2.0, 1),
            ("B2", 1.0, 2),
        ]

    def test_entries_carry_catalog_metadata(self, scenario_loans, scenario_catalog, as_of):
        top = trending(scenario_loans, scenario_catalog, 7, 2, as_of=as_of)[0]
        assert top.title == "Alpha"
        assert top.category == "X"
        assert top.source == RecommendationSource.TRENDING

    def test_zero_window_is_empty(self, scenario_loans, scenario_catalog, as_of):
        assert trending(scenario_loans, scenario_catalog, 0, 2, as_of=as_of) == []

    def test_unknown_book_never_appears(self, scenario_loans, scenario_catalog, as_of, make_loan):
        loans = scenario_loans + [make_loan("B3", "M1", 0), make_loan("B3", "M2", 0)]
        result = trending(loans, scenario_catalog, 7, 5, as_of=as_of)
        assert "B3" not in {e.book_id for e in result}


class TestWindow:
    def test_excludes_loans_older_than_window(self, library_loans, library_catalog, as_of):
        result = trending(library_loans, library_catalog, 7, 10, as_of=as_of)
        assert [e.book_id for e in result] == ["F1", "S1", "F2", "H1"]
        assert "S2" not in {e.book_id for e in result}

    def test_window_start_is_inclusive(self, library_loans, library_catalog, as_of):
        # F1's oldest loan is exactly 3 days before as_of.
        result = trending(library_loans, library_catalog, 3, 10, as_of=as_of)
        assert [(e.book_id, e.score) for e in result] == [("F1", 3.0), ("H1", 1.0)]

    def test_future_loans_excluded(self, scenario_catalog, as_of, make_loan):
        loans = [make_loan("B1", "M1", -1)]
        assert trending(loans, scenario_catalog, 7, 5, as_of=as_of) == []

    def test_undated_loans_never_count(self, library_loans, library_catalog, as_of):
        result = trending(library_loans, library_catalog, 365, 10, as_of=as_of)
        assert "F3" not in {e.book_id for e in result}

    def test_malformed_ledger_date_never_counts(self, scenario_catalog, as_of):
        loan = row_to_loan(
            {"book_id": "B1", "member_id": "M1", "loan_date": "2025-03-14 not a date"},
        )
        assert trending([loan], scenario_catalog, 7, 5, as_of=as_of) == []

    def test_negative_window_is_empty(self, scenario_loans, scenario_catalog, as_of):
        assert trending(scenario_loans, scenario_catalog, -5, 2, as_of=as_of) == []

    def test_defaults_to_today(self, scenario_catalog, make_loan):
        from biblio_recommender.utils.time_utils import today_utc

        loans = [
            make_loan("B1", "M1", 0).model_copy(update={"loan_date": today_utc()}),
        ]
        result = trending(loans, scenario_catalog, DEFAULT_WINDOW_DAYS, 5)
        assert [e.book_id for e in result] == ["B1"]


class TestLimits:
    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit_is_empty(self, scenario_loans, scenario_catalog, as_of, limit):
        assert trending(scenario_loans, scenario_catalog, 7, limit, as_of=as_of) == []

    @pytest.mark.parametrize("limit", [1, 2, 3, 10])
    def test_length_never_exceeds_limit(self, library_loans, library_catalog, as_of, limit):
        result = trending(library_loans, library_catalog, 7, limit, as_of=as_of)
        assert len(result) <= limit
        assert [e.rank for e in result] == list(range(1, len(result) + 1))

    def test_empty_ledger(self, scenario_catalog, as_of):
        assert trending([], scenario_catalog, 7, 5, as_of=as_of) == []

    def test_empty_catalog(self, scenario_loans, as_of):
        assert trending(scenario_loans, {}, 7, 5, as_of=as_of) == []


class TestOrdering:
    def test_ties_broken_by_title(self, library_loans, library_catalog, as_of):
        result = trending(library_loans, library_catalog, 7, 10, as_of=as_of)
        tied = [e.title for e in result if e.score == 1.0]
        assert tied == ["Emma", "SPQR"]

    def test_same_title_broken_by_id(self, make_book, make_loan, as_of):
        catalog = {
            "b": make_book("b", "Same", "X"),
            "a": make_book("a", "Same", "X"),
        }
        loans = [make_loan("b", "M1", 1), make_loan("a", "M2", 1)]
        result = trending(loans, catalog, 7, 5, as_of=as_of)
        assert [e.book_id for e in result] == ["a", "b"]

    def test_deterministic(self, library_loans, library_catalog, as_of):
        first = trending(library_loans, library_catalog, 7, 10, as_of=as_of)
        second = trending(list(reversed(library_loans)), library_catalog, 7, 10, as_of=as_of)
        assert first == second

    def test_scores_sorted_descending(self, library_loans, library_catalog, as_of):
        result = trending(library_loans, library_catalog, 60, 10, as_of=as_of + timedelta(days=1))
        scores = [e.score for e in result]
        assert scores == sorted(scores, reverse=True)
        assert all(s >= 0 for s in scores)
