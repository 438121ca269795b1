"""
Book Pydantic Schemas

Schemas:
- BookResponse: A mirrored or catalog book as returned by the API
- CatalogSearchResponse: One page of external catalog search results
"""

from pydantic import BaseModel, ConfigDict, Field

from bookhaven.schemas.common import PaginationMeta


class BookResponse(BaseModel):
    """Book data shared by the mirror, the catalog, lists and recommendations."""

    id: str = Field(..., description="External catalog identifier", examples=["zyTCAlFPjgYC"])
    title: str = Field(..., description="Book title", examples=["The Google Story"])
    authors: str = Field(
        default="",
        description="Comma-separated author names",
        examples=["David A. Vise, Mark Malseed"],
    )
    image: str | None = Field(default=None, description="Cover image URL")
    description: str | None = Field(default=None, description="Synopsis")
    categories: list[str] = Field(default_factory=list, description="Category tags")
    average_rating: float | None = Field(default=None, description="Mean rating")

    model_config = ConfigDict(from_attributes=True)


class CatalogSearchResponse(BaseModel):
    """A page of books from the external catalog."""

    books: list[BookResponse] = Field(..., description="Books on this page")
    pagination: PaginationMeta = Field(..., description="Pagination info")
