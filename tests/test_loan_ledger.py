from datetime import datetime, timezone

import pytest

from library_api.app.core.errors import Conflict

from .conftest import ISBN

DUE = datetime(2024, 1, 8, tzinfo=timezone.utc)


@pytest.fixture
def reader(add_book, add_borrower):
    add_book(quantity=5)
    add_book(isbn=1234, quantity=5)
    return add_borrower()


def test_create_exists_destroy(loans, reader):
    assert not loans.exists(reader.id, ISBN)

    loan = loans.create(reader.id, ISBN, DUE)
    assert loan.borrower_id == reader.id
    assert loan.isbn == ISBN
    assert loan.due_date == DUE
    assert loans.exists(reader.id, ISBN)

    assert loans.destroy(reader.id, ISBN) is True
    assert not loans.exists(reader.id, ISBN)
    assert loans.destroy(reader.id, ISBN) is False


def test_same_pair_cannot_be_loaned_twice(loans, reader):
    loans.create(reader.id, ISBN, DUE)
    with pytest.raises(Conflict, match="already borrowed"):
        loans.create(reader.id, ISBN, DUE)
    assert len(loans.find_by_borrower(reader.id)) == 1


def test_find_by_borrower(loans, reader, add_borrower):
    other = add_borrower()
    loans.create(reader.id, ISBN, DUE)
    loans.create(reader.id, 1234, DUE)
    loans.create(other.id, ISBN, DUE)

    assert [loan.isbn for loan in loans.find_by_borrower(reader.id)] == [ISBN, 1234]
    assert [loan.isbn for loan in loans.find_by_borrower(other.id)] == [ISBN]


def test_find_overdue_is_strict(loans, reader):
    loans.create(reader.id, ISBN, DUE)

    assert loans.find_overdue(DUE) == []
    overdue = loans.find_overdue(datetime(2024, 1, 8, 0, 0, 1, tzinfo=timezone.utc))
    assert [(loan.borrower_id, loan.isbn) for loan in overdue] == [(reader.id, ISBN)]


def test_has_loans(loans, reader, add_borrower):
    idle = add_borrower()
    loans.create(reader.id, ISBN, DUE)

    assert loans.has_loans_for_book(ISBN)
    assert not loans.has_loans_for_book(1234)
    assert loans.has_loans_for_borrower(reader.id)
    assert not loans.has_loans_for_borrower(idle.id)
