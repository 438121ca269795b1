"""
User Models

Represents a member of the reading community together with the records
created alongside the account at registration.

SQLAlchemy 2.0 Features Used:
- mapped_column(): New way to define columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- relationship(): Define relationships between models

Tables:
- users: credentials and identity
- user_profiles: bio (one per user)
- favorite_genres: genre tags used by recommendations
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.book_list import BookList
    from bookhaven.models.comment import Comment
    from bookhaven.models.post import Post, PostComment
    from bookhaven.models.rating import BookRating


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Relationships:
    - profile: One-to-One with UserProfile
    - favorite_genres: One-to-Many with FavoriteGenre
    - book_lists: One-to-Many with BookList
    - ratings, comments, posts, post_comments: One-to-Many

    Indexes:
    - Primary key on id (automatic)
    - email: Unique index for login lookups
    - username: Unique index for public profiles

    Example:
        user = User(
            email="alice@example.com",
            username="alice",
            hashed_password=hash_password("secret123"),
            birthdate=date(1990, 5, 1),
        )
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique username shown on public profiles"
    )

    birthdate: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Date of birth given at registration"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    profile: Mapped["UserProfile"] = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    favorite_genres: Mapped[list["FavoriteGenre"]] = relationship(
        "FavoriteGenre",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="FavoriteGenre.id",
    )

    book_lists: Mapped[list["BookList"]] = relationship(
        "BookList",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="BookList.id",
    )

    ratings: Mapped[list["BookRating"]] = relationship(
        "BookRating",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    posts: Mapped[list["Post"]] = relationship(
        "Post",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    post_comments: Mapped[list["PostComment"]] = relationship(
        "PostComment",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def genre_names(self) -> list[str]:
        """Favorite genre names in the order they were saved."""
        return [genre.name for genre in self.favorite_genres]

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, email='{self.email}', username='{self.username}')"


class UserProfile(Base):
    """Free-form profile data, one row per user."""

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    bio: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="User biography"
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")

    def __repr__(self) -> str:
        return f"UserProfile(id={self.id}, user_id={self.user_id})"


class FavoriteGenre(Base):
    """
    A genre tag the user declared as a favorite.

    The whole set is deleted and recreated whenever the profile is updated,
    so rows are never edited in place.
    """

    __tablename__ = "favorite_genres"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre name, matched against book categories"
    )

    user: Mapped["User"] = relationship("User", back_populates="favorite_genres")

    def __repr__(self) -> str:
        return f"FavoriteGenre(id={self.id}, user_id={self.user_id}, name='{self.name}')"
