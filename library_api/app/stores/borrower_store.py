"""
Borrower store: registered borrowers keyed by id, unique by email.

Renames look borrowers up by email while deletions use the id, since
clients know a borrower's email but not necessarily the id the store
assigned to them.
"""

import logging
import sqlite3
from typing import List, Optional

from library_api.app.core.db import Database, parse_timestamp
from library_api.app.core.errors import DuplicateKey, InvalidInput, NotFound
from library_api.app.core.validation import normalize_email
from library_api.app.schemas.borrower import BorrowerRead

logger = logging.getLogger(__name__)

MISSING_PARAMETERS = "Missing request parameters"
EMAIL_EXISTS = "Email already exists"
EMAIL_NOT_FOUND = "Email does not exist"
BORROWER_NOT_FOUND = "Borrower does not exist"


def _require_name_and_email(name: Optional[str], email: Optional[str]) -> str:
    if not (name and name.strip() and email and email.strip()):
        raise InvalidInput(MISSING_PARAMETERS)
    return normalize_email(email.strip())


class BorrowerStore:
    """Borrower records kept in the ``borrowers`` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    @staticmethod
    def _to_borrower(row: sqlite3.Row) -> BorrowerRead:
        return BorrowerRead(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            registered_at=parse_timestamp(row["registered_at"]),
        )

    def find_by_id(self, borrower_id: int) -> Optional[BorrowerRead]:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT id, name, email, registered_at FROM borrowers WHERE id = ?",
                (borrower_id,),
            ).fetchone()
        return self._to_borrower(row) if row else None

    def find_by_email(self, email: str) -> Optional[BorrowerRead]:
        with self.database.connection() as conn:
            row = conn.execute(
                "SELECT id, name, email, registered_at FROM borrowers WHERE email = ?",
                (email,),
            ).fetchone()
        return self._to_borrower(row) if row else None

    def exists(self, borrower_id: int) -> bool:
        return self.find_by_id(borrower_id) is not None

    def create(self, name: Optional[str], email: Optional[str]) -> BorrowerRead:
        """Register a borrower.

        Raises ``InvalidInput`` for a missing field or malformed email
        and ``DuplicateKey`` when the email is already registered.
        """
        email = _require_name_and_email(name, email)
        with self.database.transaction() as conn:
            if self.find_by_email(email) is not None:
                raise DuplicateKey(EMAIL_EXISTS)
            try:
                cursor = conn.execute(
                    "INSERT INTO borrowers (name, email) VALUES (?, ?)",
                    (name.strip(), email),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateKey(EMAIL_EXISTS) from exc
            borrower = self.find_by_id(cursor.lastrowid)
        logger.info("Registered borrower %s <%s>", borrower.id, email)
        return borrower

    def update(self, email: Optional[str], name: Optional[str]) -> BorrowerRead:
        """Rename the borrower registered under ``email``."""
        email = _require_name_and_email(name, email)
        with self.database.transaction() as conn:
            existing = self.find_by_email(email)
            if existing is None:
                raise NotFound(EMAIL_NOT_FOUND)
            conn.execute(
                "UPDATE borrowers SET name = ? WHERE id = ?",
                (name.strip(), existing.id),
            )
            borrower = self.find_by_id(existing.id)
        logger.info("Renamed borrower %s", borrower.id)
        return borrower

    def delete(self, borrower_id: int) -> None:
        with self.database.transaction() as conn:
            cursor = conn.execute("DELETE FROM borrowers WHERE id = ?", (borrower_id,))
            if cursor.rowcount == 0:
                raise NotFound(BORROWER_NOT_FOUND)
        logger.info("Deleted borrower %s", borrower_id)

    def list(self) -> List[BorrowerRead]:
        with self.database.connection() as conn:
            rows = conn.execute(
                "SELECT id, name, email, registered_at FROM borrowers ORDER BY id"
            ).fetchall()
        return [self._to_borrower(row) for row in rows]
