import pytest

from library_api.app.core.errors import InvalidInput
from library_api.app.core.validation import (
    coerce_isbn,
    looks_numeric,
    normalize_email,
    normalize_isbn,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("978-3-16-148410-0", 9783161484100),
        ("978316148420", 978316148420),
        (978316148420, 978316148420),
        (" 0-306-40615-2 ", 306406152),
        ("123456789012345678901234567890", 123456789012345678901234567890),
    ],
)
def test_normalize_isbn_strips_hyphens(raw, expected):
    assert normalize_isbn(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "978-3-16-X", "12.5", "+123", "-", "0", 0, -5, True])
def test_normalize_isbn_rejects_garbage(raw):
    with pytest.raises(InvalidInput, match="Invalid ISBN"):
        normalize_isbn(raw)


def test_normalize_isbn_uses_given_message():
    with pytest.raises(InvalidInput, match="Invalid parameters"):
        normalize_isbn("nope", "Invalid parameters")


def test_coerce_isbn_for_schemas():
    assert coerce_isbn(None) is None
    assert coerce_isbn("") is None
    assert coerce_isbn("978-0-306-40615-7") == 9780306406157
    with pytest.raises(ValueError):
        coerce_isbn("not-an-isbn")


@pytest.mark.parametrize("text", ["1984", "12 Angry Men", " 7", "-3 ways"])
def test_looks_numeric(text):
    assert looks_numeric(text)


@pytest.mark.parametrize("text", ["Dune", "Catch-22", "", "The 39 Steps"])
def test_does_not_look_numeric(text):
    assert not looks_numeric(text)


def test_normalize_email_accepts_valid_address():
    assert normalize_email("first@euser.org") == "first@euser.org"


@pytest.mark.parametrize("email", ["not-an-email", "a@", "@euser.org", "two@@euser.org", "spaces in@euser.org"])
def test_normalize_email_rejects_malformed(email):
    with pytest.raises(InvalidInput, match="Invalid email"):
        normalize_email(email)


def test_normalize_isbn_rejects_more_digits_than_int_allows():
    with pytest.raises(InvalidInput, match="Invalid ISBN"):
        normalize_isbn("9" * 5000)
