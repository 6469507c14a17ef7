"""
Top-level router for version 1 of the API.

The library API exposes its routes at the root (``/books``,
``/borrow`` ...), so the routers below are included without a version
prefix.  The loans router defines its own paths internally.
"""

from fastapi import APIRouter

from .endpoints import books, borrowers, loans

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(borrowers.router, prefix="/borrowers", tags=["borrowers"])
router.include_router(loans.router, tags=["loans"])
