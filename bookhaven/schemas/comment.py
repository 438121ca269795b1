"""
Comment Pydantic Schemas

Comments on books and on posts share the same shape.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bookhaven.schemas.user import UserBrief


class CommentCreate(BaseModel):
    book_id: str = Field(..., min_length=1, max_length=64)
    content: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentResponse(BaseModel):
    id: int
    book_id: str
    content: str
    created_at: datetime
    user: UserBrief

    model_config = ConfigDict(from_attributes=True)


class PostCommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class PostCommentResponse(BaseModel):
    id: int
    post_id: int
    content: str
    created_at: datetime
    user: UserBrief

    model_config = ConfigDict(from_attributes=True)
