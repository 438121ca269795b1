"""
Rating Pydantic Schemas

The rating value is accepted as a number and validated by the ratings
service: values outside 1-5 are rejected, fractional values are floored.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RatingCreate(BaseModel):
    book_id: str = Field(..., min_length=1, max_length=64, description="External catalog identifier")
    rating: float = Field(..., description="Stars from 1 to 5", examples=[4])

    model_config = ConfigDict(str_strip_whitespace=True)


class RatingResult(BaseModel):
    """Outcome of rating a book."""

    rating: int = Field(..., description="Stored rating")
    average: float = Field(..., description="Book's new mean rating")
    count: int = Field(..., description="Number of ratings for the book")


class RatingEntry(BaseModel):
    user_id: int
    username: str
    rating: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookRatingsResponse(BaseModel):
    """All ratings of one book plus the aggregate."""

    ratings: list[RatingEntry] = Field(default_factory=list)
    average: float = Field(..., description="Mean of current ratings, 0 when none")
    count: int = Field(..., description="Number of ratings")
    user_rating: int | None = Field(default=None, description="The given user's rating, if any")
