"""
Catalog store: book records and their available stock.

Besides CRUD and search, the store exposes the two stock primitives
used by the borrowing service.  ``take_copy`` is a single conditional
``UPDATE`` so the quantity can never be driven below zero, even if two
borrows were to reach it at the same time.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from library_api.app.core.db import Database
from library_api.app.core.errors import DuplicateKey, InvalidInput, NotFound
from library_api.app.core.validation import looks_numeric, normalize_isbn
from library_api.app.schemas.book import BookCreate, BookRead

logger = logging.getLogger(__name__)

INVALID_PARAMETERS = "Invalid parameters"
BOOK_EXISTS = "Book with the same ISBN already exists"
ISBN_NOT_FOUND = "ISBN does not exist"
NO_FIELDS = "No fields given to update"

# API field name -> column name
UPDATABLE_COLUMNS = {
    "title": "title",
    "author": "author",
    "quantity": "quantity",
    "shelf_location": "shelf_location",
}


def _check_book_fields(fields: Dict[str, Any]) -> None:
    """Validate whichever book fields are present in ``fields``."""
    for name in ("title", "author"):
        if name in fields:
            value = fields[name]
            if not isinstance(value, str) or not value.strip() or looks_numeric(value):
                raise InvalidInput(INVALID_PARAMETERS)
    if "quantity" in fields:
        quantity = fields["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidInput(INVALID_PARAMETERS)
    if "shelf_location" in fields:
        location = fields["shelf_location"]
        if not isinstance(location, str) or not location.strip():
            raise InvalidInput(INVALID_PARAMETERS)


class CatalogStore:
    """Book records kept in the ``books`` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    @staticmethod
    def _to_book(row: sqlite3.Row) -> BookRead:
        return BookRead(
            isbn=int(row["isbn"]),
            title=row["title"],
            author=row["author"],
            quantity=row["quantity"],
            shelf_location=row["shelf_location"],
        )

    def find_by_isbn(self, isbn: int) -> Optional[BookRead]:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT isbn, title, author, quantity, shelf_location FROM books WHERE isbn = ?",
                (str(isbn),),
            ).fetchone()
        return self._to_book(row) if row else None

    def exists(self, isbn: int) -> bool:
        with self.database.connection() as conn:
            row = conn.execute("SELECT 1 FROM books WHERE isbn = ?", (str(isbn),)).fetchone()
        return row is not None

    def create(self, data: BookCreate) -> BookRead:
        """Add a book to the catalog.

        Every field is required.  Titles and authors that start like a
        number are rejected, as is a negative or non-integer quantity.
        """
        isbn = normalize_isbn(data.isbn, INVALID_PARAMETERS)
        fields = {
            "title": data.title,
            "author": data.author,
            "quantity": data.quantity,
            "shelf_location": data.shelf_location,
        }
        if any(value is None for value in fields.values()):
            raise InvalidInput(INVALID_PARAMETERS)
        _check_book_fields(fields)

        with self.database.transaction() as conn:
            if self.exists(isbn):
                raise DuplicateKey(BOOK_EXISTS)
            try:
                conn.execute(
                    """
                    INSERT INTO books (isbn, title, author, quantity, shelf_location)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (str(isbn), fields["title"], fields["author"], fields["quantity"], fields["shelf_location"]),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateKey(BOOK_EXISTS) from exc
        logger.info("Added book %s (%s copies)", isbn, fields["quantity"])
        return BookRead(isbn=isbn, **fields)

    def update(self, isbn: Any, changes: Dict[str, Any]) -> BookRead:
        """Change the given fields of an existing book and return it."""
        number = normalize_isbn(isbn)
        with self.database.transaction() as conn:
            if not self.exists(number):
                raise NotFound(ISBN_NOT_FOUND)
            columns = {UPDATABLE_COLUMNS[name]: value for name, value in changes.items() if name in UPDATABLE_COLUMNS}
            if not columns:
                raise InvalidInput(NO_FIELDS)
            _check_book_fields(columns)
            assignments = ", ".join(f"{column} = ?" for column in columns)
            conn.execute(
                f"UPDATE books SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE isbn = ?",
                (*columns.values(), str(number)),
            )
            book = self.find_by_isbn(number)
        logger.info("Updated book %s: %s", number, ", ".join(columns))
        return book

    def delete(self, isbn: int) -> None:
        """Remove a book.  Loan checks belong to the borrowing service."""
        with self.database.transaction() as conn:
            cursor = conn.execute("DELETE FROM books WHERE isbn = ?", (str(isbn),))
            if cursor.rowcount == 0:
                raise NotFound(ISBN_NOT_FOUND)
        logger.info("Deleted book %s", isbn)

    def search(
        self,
        isbn: Any = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> List[BookRead]:
        """Return books matching ANY of the given filters.

        Filters are combined with OR, not AND: searching by title and
        author returns books matching either.  Without filters every
        book is returned.
        """
        clauses: List[str] = []
        params: List[str] = []
        if isbn is not None and isbn != "":
            clauses.append("isbn = ?")
            params.append(str(normalize_isbn(isbn)))
        if title:
            clauses.append("title = ?")
            params.append(title)
        if author:
            clauses.append("author = ?")
            params.append(author)

        query = "SELECT isbn, title, author, quantity, shelf_location FROM books"
        if clauses:
            query += " WHERE " + " OR ".join(clauses)
        query += " ORDER BY rowid"
        with self.database.connection() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._to_book(row) for row in rows]

    def take_copy(self, isbn: int) -> bool:
        """Decrement the available quantity if it is positive.

        Returns ``False`` when no copy was left (or the book is gone).
        """
        with self.database.transaction() as conn:
            cursor = conn.execute(
                "UPDATE books SET quantity = quantity - 1 WHERE isbn = ? AND quantity > 0",
                (str(isbn),),
            )
        return cursor.rowcount == 1

    def put_back_copy(self, isbn: int) -> None:
        with self.database.transaction() as conn:
            cursor = conn.execute(
                "UPDATE books SET quantity = quantity + 1 WHERE isbn = ?",
                (str(isbn),),
            )
            if cursor.rowcount == 0:
                raise NotFound(ISBN_NOT_FOUND)
