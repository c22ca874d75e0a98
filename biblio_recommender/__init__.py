"""Loan-ledger analytics: trending, content-based and collaborative book recommendations."""

__version__ = "0.1.0"
