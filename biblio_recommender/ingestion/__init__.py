"""
Data-fetch boundary: parse ledger and catalog files into validated models.

Modules
-------
ledger   parse_ledger_csv() / parse_ledger_json() / load_ledger().
catalog  parse_catalog_csv() / parse_catalog_json() / load_catalog().
_fields  Shared row-coercion helpers (required/optional strings, booleans).

The recommendation engines never parse files; all coercion happens here.
"""
