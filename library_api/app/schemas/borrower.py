"""
Pydantic models for borrower data.

Email syntax and uniqueness are checked by the borrower store, not
here, so that a malformed address is reported as ``Invalid email``
rather than a generic schema error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BorrowerWrite(BaseModel):
    """Schema for registering a borrower or renaming one (looked up by email)."""

    name: Optional[str] = Field(None, examples=["F. Irst Euser"])
    email: Optional[str] = Field(None, examples=["first@euser.org"])


class BorrowerDelete(BaseModel):
    borrower_id: Optional[int] = Field(None, alias="borrowerId")

    model_config = {
        "populate_by_name": True,
    }


class BorrowerRead(BaseModel):
    """Schema for reading a borrower from the API."""

    id: int
    name: str
    email: str
    registered_at: datetime = Field(..., alias="registeredAt")

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }
