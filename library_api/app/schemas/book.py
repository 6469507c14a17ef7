"""
Pydantic models for book data.

Request models are deliberately permissive (every field optional,
ISBN accepted as an integer or a hyphenated string) so that the
catalog store can report missing or malformed fields with the same
messages regardless of how the request reached it.  ``BookRead`` is
what the API returns.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from library_api.app.core.validation import coerce_isbn


class BookRead(BaseModel):
    """Schema for reading a book from the API."""

    isbn: int = Field(..., examples=[978316148420])
    title: str = Field(..., examples=["History of hairbrushes"])
    author: str = Field(..., examples=["Afro B. Rusher"])
    quantity: int = Field(..., ge=0, examples=[12])
    shelf_location: str = Field(..., alias="shelfLocation", examples=["A12"])

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class BookCreate(BaseModel):
    """Schema for adding a book to the catalog."""

    isbn: Optional[Union[int, str]] = Field(None, examples=["978-3-16-148410-0"])
    title: Optional[str] = None
    author: Optional[str] = None
    quantity: Optional[int] = None
    shelf_location: Optional[str] = Field(None, alias="shelfLocation")

    model_config = {
        "populate_by_name": True,
    }


class BookUpdate(BookCreate):
    """Schema for updating a book.

    ``isbn`` identifies the book; every other field is optional and
    only the provided ones are changed.
    """

    def changes(self) -> dict:
        """Return the provided fields other than ``isbn``, keyed by column name."""
        return {
            name: value
            for name, value in self.model_dump(exclude={"isbn"}).items()
            if value is not None
        }


class BookDelete(BaseModel):
    isbn: Optional[int] = None

    @field_validator("isbn", mode="before")
    @classmethod
    def _normalize_isbn(cls, value):
        return coerce_isbn(value)
