"""
Error taxonomy shared by the stores, the borrowing service and the API.

All of these describe conditions the caller can fix (bad input, an
unknown id, an already borrowed book) and are answered with HTTP 400.
Anything that is not a ``LibraryError`` is an internal failure and is
answered with an opaque 500 by the handlers in ``main``.
"""


class LibraryError(Exception):
    """Base class for expected, caller-recoverable failures."""

    kind = "library_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "error": self.kind}


class InvalidInput(LibraryError):
    """Malformed, missing or out-of-range request data."""

    kind = "invalid_input"


class NotFound(LibraryError):
    """A referenced book, borrower or loan does not exist."""

    kind = "not_found"


class DuplicateKey(LibraryError):
    """A create would violate a uniqueness rule (ISBN, email)."""

    kind = "duplicate_key"


class Conflict(LibraryError):
    """The request clashes with the current loan state."""

    kind = "conflict"


class OutOfStock(Conflict):
    kind = "out_of_stock"
