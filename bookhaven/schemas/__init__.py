"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: Different rules for requests and responses
3. Decoupling: Database schema can evolve independently of API
4. Documentation: Schemas generate OpenAPI documentation

Schema Naming Convention:
- XxxCreate / XxxRequest: Request bodies
- XxxUpdate: Partial updates (all fields optional)
- XxxResponse: Payloads placed inside the APIResponse envelope
"""

from bookhaven.schemas.common import APIResponse, PaginationMeta, fail, ok
from bookhaven.schemas.book import BookResponse, CatalogSearchResponse
from bookhaven.schemas.book_list import (
    AddBookRequest,
    BookListCreate,
    BookListEntryResponse,
    BookListResponse,
)
from bookhaven.schemas.user import (
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    RegisterRequest,
    TokenResponse,
    UserBrief,
    UserResponse,
    UserSummary,
)
from bookhaven.schemas.rating import (
    BookRatingsResponse,
    RatingCreate,
    RatingEntry,
    RatingResult,
)
from bookhaven.schemas.comment import (
    CommentCreate,
    CommentResponse,
    PostCommentCreate,
    PostCommentResponse,
)
from bookhaven.schemas.post import (
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "APIResponse",
    "PaginationMeta",
    "ok",
    "fail",
    "BookResponse",
    "CatalogSearchResponse",
    "AddBookRequest",
    "BookListCreate",
    "BookListEntryResponse",
    "BookListResponse",
    "LoginRequest",
    "ProfileResponse",
    "ProfileUpdate",
    "PublicProfileResponse",
    "RegisterRequest",
    "TokenResponse",
    "UserBrief",
    "UserResponse",
    "UserSummary",
    "BookRatingsResponse",
    "RatingCreate",
    "RatingEntry",
    "RatingResult",
    "CommentCreate",
    "CommentResponse",
    "PostCommentCreate",
    "PostCommentResponse",
    "PostCreate",
    "PostListResponse",
    "PostResponse",
    "PostUpdate",
]
