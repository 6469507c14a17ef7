"""
Borrower endpoints for API v1.

Borrowers are renamed by email and deleted by id.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from library_api.app.api.deps import get_borrowers, get_borrowing_service
from library_api.app.schemas.borrower import BorrowerDelete, BorrowerRead, BorrowerWrite
from library_api.app.schemas.loan import MessageResponse
from library_api.app.services.borrowing_service import BorrowingService
from library_api.app.stores.borrower_store import BorrowerStore


router = APIRouter()


@router.post("", response_model=BorrowerRead, status_code=status.HTTP_201_CREATED)
def register_borrower(
    payload: BorrowerWrite,
    borrowers: BorrowerStore = Depends(get_borrowers),
) -> BorrowerRead:
    """Register a borrower.  The email must be valid and not yet registered."""
    return borrowers.create(payload.name, payload.email)


@router.patch("", response_model=BorrowerRead)
def update_borrower(
    payload: BorrowerWrite,
    borrowers: BorrowerStore = Depends(get_borrowers),
) -> BorrowerRead:
    """Change the name of the borrower registered under ``email``."""
    return borrowers.update(payload.email, payload.name)


@router.delete("", response_model=MessageResponse)
def delete_borrower(
    payload: BorrowerDelete,
    service: BorrowingService = Depends(get_borrowing_service),
) -> MessageResponse:
    service.remove_borrower(payload.borrower_id)
    return MessageResponse(message="Borrower deleted successfully")


@router.get("", response_model=List[BorrowerRead])
def list_borrowers(borrowers: BorrowerStore = Depends(get_borrowers)) -> List[BorrowerRead]:
    return borrowers.list()
