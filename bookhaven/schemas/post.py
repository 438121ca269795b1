"""
Post Pydantic Schemas

Schemas:
- PostCreate: New post (title and content required)
- PostUpdate: Partial update, at least one field
- PostResponse: Post with author and comment count
- PostListResponse: Paginated posts
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bookhaven.schemas.common import PaginationMeta
from bookhaven.schemas.user import UserBrief


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, examples=["Just finished Dune"])
    content: str = Field(..., min_length=1, max_length=10000)
    book_title: str | None = Field(default=None, max_length=500)
    book_author: str | None = Field(default=None, max_length=500)
    book_id: str | None = Field(default=None, max_length=64)

    model_config = ConfigDict(str_strip_whitespace=True)


class PostUpdate(BaseModel):
    """All fields optional, but an empty update is rejected."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1, max_length=10000)
    book_title: str | None = Field(default=None, max_length=500)
    book_author: str | None = Field(default=None, max_length=500)
    book_id: str | None = Field(default=None, max_length=64)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def require_one_field(self) -> "PostUpdate":
        if all(getattr(self, name) is None for name in self.model_fields_set):
            raise ValueError("At least one field must be provided")
        return self


class PostResponse(BaseModel):
    id: int
    title: str
    content: str
    book_title: str | None = None
    book_author: str | None = None
    book_id: str | None = None
    created_at: datetime
    updated_at: datetime
    user: UserBrief
    comment_count: int = 0

    @classmethod
    def from_post(cls, post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            book_title=post.book_title,
            book_author=post.book_author,
            book_id=post.book_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
            user=UserBrief.model_validate(post.user),
            comment_count=len(post.comments),
        )


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    pagination: PaginationMeta
