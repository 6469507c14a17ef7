"""
Borrowing endpoints for API v1.

These routes expose the borrowing lifecycle: lending a copy, taking
it back, a borrower's current loans and the administrative overdue
report.  All rules live in ``BorrowingService``; handlers only unpack
the request.  Handlers are plain functions so FastAPI runs them in its
thread pool while SQLite blocks.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from library_api.app.api.deps import get_borrowing_service
from library_api.app.schemas.loan import (
    BorrowedItem,
    BorrowRequest,
    BorrowResponse,
    LoanRead,
    MessageResponse,
    ReturnRequest,
)
from library_api.app.services.borrowing_service import BorrowingService


router = APIRouter()


@router.post("/borrow", response_model=BorrowResponse)
def borrow_book(
    payload: BorrowRequest,
    service: BorrowingService = Depends(get_borrowing_service),
) -> BorrowResponse:
    """Borrow a book for 1, 7 or 30 days.

    Errors are reported in this order: missing parameters, unknown
    borrower, unknown ISBN, invalid duration, already borrowed, out of
    stock.
    """
    loan = service.borrow(payload.borrower_id, payload.book_isbn, payload.borrow_duration)
    return BorrowResponse(message="Book borrowed successfully", loan=loan)


@router.post("/return", response_model=MessageResponse)
def return_book(
    payload: ReturnRequest,
    service: BorrowingService = Depends(get_borrowing_service),
) -> MessageResponse:
    service.return_book(payload.borrower_id, payload.book_isbn)
    return MessageResponse(message="Book returned successfully")


@router.get("/borrowed", response_model=List[BorrowedItem])
def list_borrowed(
    borrower_id: Optional[int] = Query(None, alias="borrowerId"),
    service: BorrowingService = Depends(get_borrowing_service),
) -> List[BorrowedItem]:
    """List the books a borrower currently holds, with their due dates."""
    return service.list_borrowed(borrower_id)


@router.get("/overdue", response_model=List[LoanRead])
def list_overdue(
    as_of: Optional[datetime] = Query(None, alias="asOf", description="Reference instant, defaults to now"),
    service: BorrowingService = Depends(get_borrowing_service),
) -> List[LoanRead]:
    """List every loan past its due date, across all borrowers."""
    return service.list_overdue(as_of)
