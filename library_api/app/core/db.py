"""
SQLite database handle, transactions and the migration system.

``Database`` wraps a database file and hands out connections.  Two
context managers are provided:

* ``connection()`` for reads; statements run in autocommit mode.
* ``transaction()`` for writes; it opens ``BEGIN IMMEDIATE`` so the
  write lock is taken before the first read, which serializes every
  read-check-write sequence (stock checks, duplicate loan checks)
  across threads and processes sharing the file.

Both reuse the transaction already open on the current thread, so a
store method called from inside a borrowing transaction joins it
instead of committing on its own.

Migrations are stored as ``(version, sql)`` pairs.  Applied versions
are recorded in the ``migrations`` table and new ones run in order by
``init_schema``.
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from .config import Settings

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        -- ISBNs are stored as decimal text so values wider than 64 bits
        -- keep their precision.
        CREATE TABLE IF NOT EXISTS books (
            isbn TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            author TEXT NOT NULL,
            quantity INTEGER NOT NULL CHECK (quantity >= 0),
            shelf_location TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS borrowers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            registered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- One row per active loan.  The composite key forbids a borrower
        -- from holding two loans of the same book at once.
        CREATE TABLE IF NOT EXISTS loans (
            borrower_id INTEGER NOT NULL,
            book_isbn TEXT NOT NULL,
            due_date TIMESTAMP NOT NULL,
            borrowed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (borrower_id, book_isbn),
            FOREIGN KEY(borrower_id) REFERENCES borrowers(id),
            FOREIGN KEY(book_isbn) REFERENCES books(isbn)
        );
        """,
    ),
    # Migration 2: lookup indexes for search and the overdue report
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_books_title ON books(title);
        CREATE INDEX IF NOT EXISTS idx_books_author ON books(author);
        CREATE INDEX IF NOT EXISTS idx_loans_book_isbn ON loans(book_isbn);
        CREATE INDEX IF NOT EXISTS idx_loans_due_date ON loans(due_date);
        """,
    ),
]


def resolve_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative ones are resolved against
    the project root (the directory holding the ``library_api``
    package).
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parents[3]
    return str((base_dir / db_url).resolve())


def format_timestamp(value: datetime) -> str:
    """Render a datetime in the store's UTC text format."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class Database:
    """A SQLite database file plus per-thread transaction tracking."""

    def __init__(self, path: str, timeout: float = 30.0) -> None:
        self.path = path
        self.timeout = timeout
        self._local = threading.local()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(resolve_database_path(settings.database_url), settings.database_timeout)

    def connect(self) -> sqlite3.Connection:
        """Open a new connection in autocommit mode with foreign keys enforced."""
        conn = sqlite3.connect(
            self.path,
            timeout=self.timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _active(self) -> Optional[sqlite3.Connection]:
        return getattr(self._local, "conn", None)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection for reads, joining the thread's open transaction if any."""
        active = self._active()
        if active is not None:
            yield active
            return
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements as one atomic unit.

        Commits when the block exits normally and rolls back on any
        exception.  Nested calls on the same thread join the outer
        transaction.
        """
        active = self._active()
        if active is not None:
            yield active
            return
        conn = self.connect()
        self._local.conn = conn
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            self._local.conn = None
            conn.close()

    def init_schema(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        conn = self.connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    logger.info("Applying migration %s to %s", version, self.path)
                    conn.executescript(sql)
                    conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version
        finally:
            conn.close()
