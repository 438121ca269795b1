"""
Book List Pydantic Schemas

Schemas:
- BookListCreate: Create a named list
- AddBookRequest: Place a catalog book on a list (also upserts the mirror)
- BookListEntryResponse / BookListResponse: Lists with their books
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bookhaven.schemas.book import BookResponse


class BookListCreate(BaseModel):
    """Name is trimmed and must not be blank."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="List name, unique per user",
        examples=["Summer 2025"],
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class AddBookRequest(BaseModel):
    """
    Catalog data for the book being added.

    Fields left out are not written to an existing mirror row; categories
    and average_rating are optional.
    """

    book_id: str = Field(..., min_length=1, max_length=64, description="External catalog identifier")
    title: str = Field(..., min_length=1, max_length=500)
    authors: str = Field(..., min_length=1, max_length=500)
    image: str | None = None
    description: str | None = None
    categories: list[str] | None = None
    average_rating: float | None = Field(default=None, ge=0, le=5)

    model_config = ConfigDict(str_strip_whitespace=True)


class BookListEntryResponse(BaseModel):
    book: BookResponse
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookListResponse(BaseModel):
    """A list and its books, newest first."""

    id: int = Field(..., description="List ID")
    name: str = Field(..., description="List name")
    created_at: datetime = Field(..., description="When the list was created")
    entries: list[BookListEntryResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
