"""
Loan ledger: which borrower holds which book, and until when.

A loan is identified by the ``(borrower_id, book_isbn)`` pair, which
is also the table's primary key.  The ledger does not check that the
borrower or the book exist; the borrowing service does that before
calling it, inside the same transaction.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from library_api.app.core.db import Database, format_timestamp, parse_timestamp
from library_api.app.core.errors import Conflict
from library_api.app.schemas.loan import LoanRead

logger = logging.getLogger(__name__)

ALREADY_BORROWED = "Book already borrowed"

_COLUMNS = "borrower_id, book_isbn, due_date, borrowed_at"


class LoanLedger:
    """Active loans kept in the ``loans`` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    @staticmethod
    def _to_loan(row: sqlite3.Row) -> LoanRead:
        return LoanRead(
            borrower_id=row["borrower_id"],
            isbn=int(row["book_isbn"]),
            due_date=parse_timestamp(row["due_date"]),
            borrowed_at=parse_timestamp(row["borrowed_at"]) if row["borrowed_at"] else None,
        )

    def exists(self, borrower_id: int, isbn: int) -> bool:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM loans WHERE borrower_id = ? AND book_isbn = ?",
                (borrower_id, str(isbn)),
            ).fetchone()
        return row is not None

    def create(
        self,
        borrower_id: int,
        isbn: int,
        due_date: datetime,
        borrowed_at: Optional[datetime] = None,
    ) -> LoanRead:
        """Record a loan.  A second loan for the same pair raises ``Conflict``."""
        with self.database.transaction() as conn:
            try:
                if borrowed_at is None:
                    conn.execute(
                        "INSERT INTO loans (borrower_id, book_isbn, due_date) VALUES (?, ?, ?)",
                        (borrower_id, str(isbn), format_timestamp(due_date)),
                    )
                else:
                    conn.execute(
                        "INSERT INTO loans (borrower_id, book_isbn, due_date, borrowed_at) VALUES (?, ?, ?, ?)",
                        (borrower_id, str(isbn), format_timestamp(due_date), format_timestamp(borrowed_at)),
                    )
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" not in str(exc):
                    raise
                raise Conflict(ALREADY_BORROWED) from exc
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM loans WHERE borrower_id = ? AND book_isbn = ?",
                (borrower_id, str(isbn)),
            ).fetchone()
        return self._to_loan(row)

    def destroy(self, borrower_id: int, isbn: int) -> bool:
        """Delete a loan; returns ``False`` if there was none."""
        with self.database.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM loans WHERE borrower_id = ? AND book_isbn = ?",
                (borrower_id, str(isbn)),
            )
        return cursor.rowcount == 1

    def find_by_borrower(self, borrower_id: int) -> List[LoanRead]:
        with self.database.connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM loans WHERE borrower_id = ? ORDER BY rowid",
                (borrower_id,),
            ).fetchall()
        return [self._to_loan(row) for row in rows]

    def find_overdue(self, as_of: datetime) -> List[LoanRead]:
        """Return loans whose due date is strictly before ``as_of``."""
        with self.database.connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM loans WHERE due_date < ? ORDER BY due_date, rowid",
                (format_timestamp(as_of),),
            ).fetchall()
        return [self._to_loan(row) for row in rows]

    def has_loans_for_book(self, isbn: int) -> bool:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM loans WHERE book_isbn = ? LIMIT 1", (str(isbn),)
            ).fetchone()
        return row is not None

    def has_loans_for_borrower(self, borrower_id: int) -> bool:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM loans WHERE borrower_id = ? LIMIT 1", (borrower_id,)
            ).fetchone()
        return row is not None
