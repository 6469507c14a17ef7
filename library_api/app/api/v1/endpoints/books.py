"""
Book endpoints for API v1.

CRUD over the catalog.  Deleting a book goes through the borrowing
service because a book that is still on loan cannot be removed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from library_api.app.api.deps import get_borrowing_service, get_catalog
from library_api.app.schemas.book import BookCreate, BookDelete, BookRead, BookUpdate
from library_api.app.schemas.loan import MessageResponse
from library_api.app.services.borrowing_service import BorrowingService
from library_api.app.stores.catalog_store import CatalogStore


router = APIRouter()


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
def add_book(book: BookCreate, catalog: CatalogStore = Depends(get_catalog)) -> BookRead:
    """Add a book to the catalog.

    All fields are required.  The ISBN may contain hyphens.  Returns
    400 ``Invalid parameters`` for missing or malformed fields and 400
    ``Book with the same ISBN already exists`` for a duplicate.
    """
    return catalog.create(book)


@router.patch("", response_model=BookRead)
def update_book(update: BookUpdate, catalog: CatalogStore = Depends(get_catalog)) -> BookRead:
    """Change any subset of a book's fields, identified by ``isbn``."""
    return catalog.update(update.isbn, update.changes())


@router.delete("", response_model=MessageResponse)
def delete_book(
    payload: BookDelete,
    service: BorrowingService = Depends(get_borrowing_service),
) -> MessageResponse:
    """Delete a book.  Refused while any borrower holds a copy."""
    service.remove_book(payload.isbn)
    return MessageResponse(message="Book deleted successfully")


@router.get("", response_model=List[BookRead])
def search_books(
    isbn: Optional[str] = Query(None, description="ISBN, hyphens allowed"),
    title: Optional[str] = Query(None),
    author: Optional[str] = Query(None),
    catalog: CatalogStore = Depends(get_catalog),
) -> List[BookRead]:
    """Search the catalog.

    Filters are combined with OR: a book matching any given filter is
    returned.  Without filters the whole catalog is listed.
    """
    return catalog.search(isbn=isbn, title=title, author=author)
