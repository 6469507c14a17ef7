"""
FastAPI dependencies handing the stores and the borrowing service to
route handlers.

The instances are built once by ``create_app`` and kept on
``app.state``; nothing here is a module-level global, so each test
application gets its own database.
"""

from fastapi import Request

from library_api.app.services.borrowing_service import BorrowingService
from library_api.app.stores.borrower_store import BorrowerStore
from library_api.app.stores.catalog_store import CatalogStore


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


def get_borrowers(request: Request) -> BorrowerStore:
    return request.app.state.borrowers


def get_borrowing_service(request: Request) -> BorrowingService:
    return request.app.state.borrowing
