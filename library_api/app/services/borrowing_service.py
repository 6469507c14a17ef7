"""
Business logic for borrowing and returning books.

The ``BorrowingService`` is the only component that touches more than
one store.  Every borrow and return runs its checks and its writes in
one ``Database.transaction()``, so a loan row never exists without the
matching stock decrement (and vice versa), and two requests can never
both see the last copy as available.

Request errors are reported in a fixed order, because several of them
can be true at once:

1. missing parameters
2. unknown borrower
3. unknown book
4. borrow duration outside ``ALLOWED_DURATIONS``
5. book already borrowed by this borrower
6. no copy left
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, List, Optional

from library_api.app.core.db import Database
from library_api.app.core.errors import Conflict, InvalidInput, NotFound, OutOfStock
from library_api.app.schemas.loan import BorrowedItem, LoanRead
from library_api.app.stores.borrower_store import BORROWER_NOT_FOUND, BorrowerStore
from library_api.app.stores.catalog_store import ISBN_NOT_FOUND, CatalogStore
from library_api.app.stores.loan_ledger import ALREADY_BORROWED, LoanLedger

logger = logging.getLogger(__name__)

# Loan periods offered by the library, in days.
ALLOWED_DURATIONS = frozenset({1, 7, 30})

MISSING_PARAMETERS = "Invalid request parameters"
INVALID_BORROWER = "Invalid borrower id"
INVALID_ISBN = "Invalid ISBN"
INVALID_DURATION = "Invalid borrow duration"
OUT_OF_STOCK = "Book out of stock"
NOT_BORROWED = "Book with the given ISBN is not borrowed"
BOOK_ON_LOAN = "Book has active loans"
BORROWER_HAS_LOANS = "Borrower has active loans"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_allowed_duration(value: Any) -> bool:
    """Only a JSON integer counts; ``"7"``, ``7.0`` and ``true`` do not."""
    return type(value) is int and value in ALLOWED_DURATIONS


def compute_due_date(start: datetime, days: int) -> datetime:
    """Add whole calendar days to the UTC date of ``start``.

    The time of day is discarded: a loan taken at 23:59 and one taken
    at 00:01 on the same day fall due at the same instant, midnight UTC
    of the due day.
    """
    if start.tzinfo is not None:
        start = start.astimezone(timezone.utc)
    due_day = start.date() + timedelta(days=days)
    return datetime.combine(due_day, time.min, tzinfo=timezone.utc)


class BorrowingService:
    """Borrow/return rules spanning the catalog, borrowers and the loan ledger."""

    def __init__(
        self,
        database: Database,
        catalog: CatalogStore,
        borrowers: BorrowerStore,
        loans: LoanLedger,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.database = database
        self.catalog = catalog
        self.borrowers = borrowers
        self.loans = loans
        self.clock = clock

    def borrow(
        self,
        borrower_id: Optional[int],
        isbn: Optional[int],
        duration_days: Any,
    ) -> LoanRead:
        """Lend one copy of a book to a borrower for ``duration_days`` days."""
        if not (borrower_id and isbn and duration_days):
            raise InvalidInput(MISSING_PARAMETERS)

        with self.database.transaction():
            if not self.borrowers.exists(borrower_id):
                raise NotFound(INVALID_BORROWER)
            book = self.catalog.find_by_isbn(isbn)
            if book is None:
                raise NotFound(INVALID_ISBN)
            if not is_allowed_duration(duration_days):
                raise InvalidInput(INVALID_DURATION)
            if self.loans.exists(borrower_id, isbn):
                raise Conflict(ALREADY_BORROWED)
            if book.quantity == 0:
                raise OutOfStock(OUT_OF_STOCK)

            now = self.clock()
            loan = self.loans.create(
                borrower_id,
                isbn,
                compute_due_date(now, duration_days),
                borrowed_at=now,
            )
            if not self.catalog.take_copy(isbn):
                # Rolls back the loan row inserted above.
                raise OutOfStock(OUT_OF_STOCK)

        logger.info(
            "Borrower %s borrowed %s until %s", borrower_id, isbn, loan.due_date.date().isoformat()
        )
        return loan

    def return_book(self, borrower_id: Optional[int], isbn: Optional[int]) -> None:
        """Close a loan and put the copy back on the shelf."""
        if not (borrower_id and isbn):
            raise InvalidInput(MISSING_PARAMETERS)

        with self.database.transaction():
            if not self.borrowers.exists(borrower_id):
                raise NotFound(INVALID_BORROWER)
            if not self.catalog.exists(isbn):
                raise NotFound(INVALID_ISBN)
            if not self.loans.destroy(borrower_id, isbn):
                raise Conflict(NOT_BORROWED)
            self.catalog.put_back_copy(isbn)

        logger.info("Borrower %s returned %s", borrower_id, isbn)

    def list_borrowed(self, borrower_id: Optional[int]) -> List[BorrowedItem]:
        if not borrower_id:
            raise InvalidInput(MISSING_PARAMETERS)
        if not self.borrowers.exists(borrower_id):
            raise NotFound(INVALID_BORROWER)
        loans = self.loans.find_by_borrower(borrower_id)
        return [BorrowedItem(isbn=loan.isbn, due_date=loan.due_date) for loan in loans]

    def list_overdue(self, as_of: Optional[datetime] = None) -> List[LoanRead]:
        """Every loan, across all borrowers, due strictly before ``as_of`` (default: now)."""
        return self.loans.find_overdue(as_of or self.clock())

    def remove_book(self, isbn: Optional[int]) -> None:
        """Delete a book unless someone still holds a copy of it."""
        if not isbn:
            raise InvalidInput(MISSING_PARAMETERS)
        with self.database.transaction():
            if not self.catalog.exists(isbn):
                raise NotFound(ISBN_NOT_FOUND)
            if self.loans.has_loans_for_book(isbn):
                raise Conflict(BOOK_ON_LOAN)
            self.catalog.delete(isbn)

    def remove_borrower(self, borrower_id: Optional[int]) -> None:
        """Delete a borrower unless they still hold a book."""
        if not borrower_id:
            raise InvalidInput(MISSING_PARAMETERS)
        with self.database.transaction():
            if not self.borrowers.exists(borrower_id):
                raise NotFound(BORROWER_NOT_FOUND)
            if self.loans.has_loans_for_borrower(borrower_id):
                raise Conflict(BORROWER_HAS_LOANS)
            self.borrowers.delete(borrower_id)
