"""
Input normalization helpers used by the stores and request schemas.
"""

import re
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .errors import InvalidInput

INVALID_ISBN = "Invalid ISBN"
INVALID_EMAIL = "Invalid email"

# A leading integer, with optional whitespace and sign, is enough for a
# title or author to be treated as a number.
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?\d")


def normalize_isbn(value: Any, message: str = INVALID_ISBN) -> int:
    """Turn ``978-3-16-148410-0`` style input into an integer ISBN.

    Integers are accepted as is.  Strings lose their hyphens and must
    then consist of ASCII digits only.  Zero and negative values are
    rejected because no book can carry them.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput(message)
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip().replace("-", "")
        if not (text.isascii() and text.isdigit()):
            raise InvalidInput(message)
        try:
            number = int(text)
        except ValueError as exc:
            # More digits than the interpreter will convert.
            raise InvalidInput(message) from exc
    if number <= 0:
        raise InvalidInput(message)
    return number


def looks_numeric(text: str) -> bool:
    """Return ``True`` when ``text`` starts like a number.

    Used to reject requests where title/author were swapped with a
    numeric field.
    """
    return bool(_NUMERIC_PREFIX.match(text))


def normalize_email(email: str) -> str:
    """Validate email syntax and return its normalized form.

    Deliverability (DNS) is not checked; the API only cares that the
    address is well formed.
    """
    try:
        result = validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidInput(INVALID_EMAIL) from exc
    return result.normalized


def coerce_isbn(value: Any):
    """Field validator form of ``normalize_isbn`` for request schemas.

    Empty values become ``None`` so the service can report them as
    missing parameters; malformed ones raise ``ValueError`` so pydantic
    reports a request validation error.
    """
    if value is None or value == "" or value == 0:
        return None
    try:
        return normalize_isbn(value)
    except InvalidInput as exc:
        raise ValueError(exc.message) from exc
