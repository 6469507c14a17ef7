"""
Pydantic models for the borrow/return endpoints and loan listings.

``bookISBN`` may be sent as an integer or a hyphenated string; it is
normalized to an integer here.  Presence of each field is checked by
the service, which owns the order in which request errors are reported.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from library_api.app.core.validation import coerce_isbn


class ReturnRequest(BaseModel):
    borrower_id: Optional[int] = Field(None, alias="borrowerId", examples=[1])
    book_isbn: Optional[int] = Field(None, alias="bookISBN", examples=["978-3-16-148410-0"])

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("book_isbn", mode="before")
    @classmethod
    def _normalize_isbn(cls, value):
        return coerce_isbn(value)


class BorrowRequest(ReturnRequest):
    """Schema for borrowing a book; ``borrowDuration`` is in days.

    The duration is passed on exactly as sent.  Only the service can
    tell whether it is valid, after the borrower and book checks.
    """

    borrow_duration: Any = Field(None, alias="borrowDuration", examples=[7])


class BorrowedItem(BaseModel):
    """One entry of a borrower's list of borrowed books."""

    isbn: int
    due_date: datetime = Field(..., alias="dueDate")

    model_config = {
        "populate_by_name": True,
    }


class LoanRead(BorrowedItem):
    """A loan as stored in the ledger."""

    borrower_id: int = Field(..., alias="borrowerId")
    borrowed_at: Optional[datetime] = Field(None, alias="borrowedAt")


class MessageResponse(BaseModel):
    message: str


class BorrowResponse(MessageResponse):
    loan: LoanRead
