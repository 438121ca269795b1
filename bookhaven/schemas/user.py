"""
User Pydantic Schemas

These schemas define the shape of data for registration, login and
profiles.

Schemas:
- RegisterRequest: Registration data
- LoginRequest / TokenResponse: Login exchange
- UserBrief / UserSummary: Minimal user data embedded in other responses
- UserResponse: The caller's own identity
- ProfileUpdate / ProfileResponse: Own profile with lists
- PublicProfileResponse: What other members can see

Pydantic v2 Features Used:
- model_config: Configure model behavior
- Field(): Define constraints and metadata
- field_validator: Validate and transform field values
- EmailStr: Built-in email validation
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from bookhaven.schemas.book import BookResponse
from bookhaven.schemas.book_list import BookListResponse


def _clean_genres(values: list[str] | None) -> list[str] | None:
    """Strip names, drop blanks and duplicates, keep the given order."""
    if values is None:
        return None
    cleaned: list[str] = []
    for value in values:
        name = value.strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


# =============================================================================
# Authentication
# =============================================================================


class RegisterRequest(BaseModel):
    """Schema for user registration."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (at least 6 characters)",
        examples=["secret123"],
    )
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters)",
        examples=["alice"],
    )
    birthdate: date = Field(
        ...,
        description="Date of birth",
        examples=["1990-05-01"],
    )
    favorite_genres: list[str] = Field(
        default_factory=list,
        description="Favorite genres, used for recommendations",
        examples=[["Fantasy", "Science Fiction"]],
    )

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("favorite_genres")
    @classmethod
    def clean_genres(cls, v: list[str]) -> list[str]:
        return _clean_genres(v)


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")


class UserBrief(BaseModel):
    """Author info embedded in comments and posts."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class UserSummary(UserBrief):
    """User info returned with a fresh token."""

    email: EmailStr


class TokenResponse(BaseModel):
    """
    Schema for the login response.

    Example:
        {
            "token": "eyJhbGciOiJIUzI1NiIs...",
            "token_type": "bearer",
            "expires_in": 604800,
            "user": {"id": 1, "email": "alice@example.com", "username": "alice"}
        }
    """

    token: str = Field(..., description="JWT bearer token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserSummary = Field(..., description="The authenticated user")


# =============================================================================
# Profiles
# =============================================================================


class UserResponse(BaseModel):
    """
    The caller's own identity.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier")
    email: EmailStr = Field(..., description="User's email address")
    username: str = Field(..., description="Unique username")
    birthdate: date = Field(..., description="Date of birth")
    bio: str | None = Field(default=None, description="User biography")
    favorite_genres: list[str] = Field(default_factory=list, description="Favorite genres")
    created_at: datetime | None = Field(default=None, description="When the user registered")

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            birthdate=user.birthdate,
            bio=user.profile.bio if user.profile else None,
            favorite_genres=user.genre_names,
            created_at=user.created_at,
        )


class ProfileResponse(UserResponse):
    """Own profile including every list with its books."""

    book_lists: list[BookListResponse] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user, book_lists=None) -> "ProfileResponse":
        base = UserResponse.from_user(user)
        if book_lists is None:
            book_lists = user.book_lists
        return cls(
            **base.model_dump(),
            book_lists=[BookListResponse.model_validate(book_list) for book_list in book_lists],
        )


class ProfileUpdate(BaseModel):
    """
    Schema for updating the caller's profile.

    All fields are optional. favorite_genres, when given, replaces the whole
    set (an empty list clears it).
    """

    username: str | None = Field(default=None, min_length=3, max_length=50)
    bio: str | None = Field(default=None, max_length=1000)
    favorite_genres: list[str] | None = Field(default=None)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("favorite_genres")
    @classmethod
    def clean_genres(cls, v: list[str] | None) -> list[str] | None:
        return _clean_genres(v)


class PublicUser(BaseModel):
    id: int
    username: str
    bio: str | None = None
    favorite_genres: list[str] = Field(default_factory=list)
    total_lists: int = 0


class PublicBookList(BaseModel):
    id: int
    name: str
    created_at: datetime
    total_books: int
    recent_books: list[BookResponse] = Field(
        default_factory=list,
        description="Most recently added books, newest first",
    )


class PublicProfileResponse(BaseModel):
    """Another member's profile as visible to anyone."""

    user: PublicUser
    book_lists: list[PublicBookList] = Field(default_factory=list)
