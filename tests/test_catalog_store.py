import pytest

from library_api.app.core.errors import DuplicateKey, InvalidInput, NotFound
from library_api.app.schemas.book import BookCreate

from .conftest import ISBN


def test_create_and_find(catalog, add_book):
    book = add_book(quantity=12)
    assert book.isbn == ISBN
    assert book.quantity == 12

    found = catalog.find_by_isbn(ISBN)
    assert found == book
    assert found.shelf_location == "A12"


def test_create_normalizes_hyphenated_isbn(catalog, add_book):
    add_book(isbn="978-3-16-148410-0")
    assert catalog.exists(9783161484100)


def test_isbn_wider_than_64_bits_survives(catalog, add_book):
    big = 2**70 + 3
    add_book(isbn=str(big))
    assert catalog.find_by_isbn(big).isbn == big


def test_oversized_isbn_is_invalid_input(catalog, add_book):
    with pytest.raises(InvalidInput, match="Invalid parameters"):
        add_book(isbn="9" * 5000)
    with pytest.raises(InvalidInput, match="Invalid ISBN"):
        catalog.search(isbn="9" * 5000)


def test_create_duplicate_isbn(add_book):
    add_book()
    with pytest.raises(DuplicateKey, match="already exists"):
        add_book(isbn="9783-16148420")


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "1984"},
        {"author": "42"},
        {"title": ""},
        {"quantity": -1},
        {"shelf": "  "},
        {"isbn": "abc"},
    ],
)
def test_create_rejects_invalid_fields(add_book, overrides):
    with pytest.raises(InvalidInput, match="Invalid parameters"):
        add_book(**overrides)


def test_create_rejects_missing_field(catalog):
    with pytest.raises(InvalidInput):
        catalog.create(BookCreate(isbn=ISBN, title="Dune", author="Frank Herbert", quantity=1))
    assert catalog.search() == []


def test_update_changes_only_given_fields(catalog, add_book):
    add_book(quantity=3)
    updated = catalog.update(str(ISBN), {"title": "A brief history of combs", "quantity": 0})
    assert updated.title == "A brief history of combs"
    assert updated.quantity == 0
    assert updated.author == "Afro B. Rusher"


def test_update_unknown_isbn_reported_before_missing_fields(catalog):
    with pytest.raises(NotFound, match="ISBN does not exist"):
        catalog.update(ISBN, {})


def test_update_without_fields(catalog, add_book):
    add_book()
    with pytest.raises(InvalidInput, match="No fields given to update"):
        catalog.update(ISBN, {})


def test_update_validates_fields(catalog, add_book):
    add_book()
    with pytest.raises(InvalidInput):
        catalog.update(ISBN, {"quantity": -4})
    assert catalog.find_by_isbn(ISBN).quantity == 1


def test_delete(catalog, add_book):
    add_book()
    catalog.delete(ISBN)
    assert catalog.find_by_isbn(ISBN) is None
    with pytest.raises(NotFound):
        catalog.delete(ISBN)


def test_search_without_filters_returns_everything(catalog, add_book):
    add_book(isbn=1, title="Dune")
    add_book(isbn=2, title="Emma")
    assert [book.isbn for book in catalog.search()] == [1, 2]


def test_search_combines_filters_with_or(catalog, add_book):
    add_book(isbn=1, title="X", author="Someone")
    add_book(isbn=2, title="Other", author="Y")
    add_book(isbn=3, title="Unrelated", author="Nobody")

    found = catalog.search(title="X", author="Y")
    assert sorted(book.isbn for book in found) == [1, 2]

    found = catalog.search(isbn="3", title="X")
    assert sorted(book.isbn for book in found) == [1, 3]


def test_search_with_bad_isbn(catalog):
    with pytest.raises(InvalidInput):
        catalog.search(isbn="not-a-number")


def test_take_copy_stops_at_zero(catalog, add_book):
    add_book(quantity=1)
    assert catalog.take_copy(ISBN) is True
    assert catalog.take_copy(ISBN) is False
    assert catalog.find_by_isbn(ISBN).quantity == 0

    catalog.put_back_copy(ISBN)
    assert catalog.find_by_isbn(ISBN).quantity == 1


def test_put_back_copy_unknown_book(catalog):
    with pytest.raises(NotFound):
        catalog.put_back_copy(ISBN)
