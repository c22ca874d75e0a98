"""
Domain models (pydantic, frozen).

Modules
-------
loan            LoanRecord + LoanStatus — one borrowing event.
book            Book, Catalog alias, build_catalog().
recommendation  RecommendationEntry + RecommendationSource — engine output.
"""
