"""
Loan ledger records.

``LoanRecord`` is one borrowing event: which member took which book, and
when. Records are frozen — once read from the ledger they are never
mutated. The recommendation engines consume sequences of them read-only.

``loan_date`` is a required field but may be ``None``: ingestion keeps a row
whose date was missing or unparsable and sets it to ``None``, so the record
still counts for member/book associations while being excluded from any
time-windowed counting.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class LoanStatus(StrEnum):
    """Lifecycle state of a loan as shown in ledger exports."""

    ACTIVE = "active"
    RETURNED = "returned"
    LATE = "late"


class LoanRecord(BaseModel):
    """A single borrowing event.

    Attributes:
        book_id: Catalog identifier of the borrowed book.
        member_id: Opaque identifier of the borrowing member.
        loan_date: Day the loan started; ``None`` if unknown/unparsable.
        return_date: Day the book came back, or ``None`` while still out.
        is_late: Source-system overdue flag.
        loan_id: Ledger row identifier, if the source provides one.
    """

    model_config = ConfigDict(frozen=True)

    book_id: str
    member_id: str
    loan_date: Optional[date]
    return_date: Optional[date] = None
    is_late: bool = False
    loan_id: Optional[str] = None

    @field_validator("book_id", "member_id", "loan_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: object) -> object:
        # Source systems mix integer and string ids; compare them as strings.
        if isinstance(v, (int, str)) and not isinstance(v, bool):
            return str(v).strip()
        return v

    @field_validator("book_id", "member_id")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v:
            raise ValueError("Identifier must be a non-empty string.")
        return v

    @property
    def status(self) -> LoanStatus:
        """``returned`` once a return date exists, else ``late`` or ``active``."""
        if self.return_date is not None:
            return LoanStatus.RETURNED
        if self.is_late:
            return LoanStatus.LATE
        return LoanStatus.ACTIVE
