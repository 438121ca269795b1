"""
Book Rating Model

One star rating per (user, book). Rating again overwrites the earlier value.
Book.average_rating is recomputed from these rows by services/ratings.py.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.book import Book
    from bookhaven.models.user import User


class BookRating(Base):
    """
    A user's 1-5 rating of a mirrored book.

    Attributes:
        id: Primary key
        user_id: Foreign key to users
        book_id: Foreign key to books (external identifier)
        rating: Whole stars, 1-5
        created_at / updated_at: Timestamps
    """

    __tablename__ = "book_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="ratings")
    book: Mapped["Book"] = relationship("Book", back_populates="ratings")

    __table_args__ = (
        # One rating per user per book
        UniqueConstraint("user_id", "book_id", name="uq_book_rating_user_book"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_book_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<BookRating(user_id={self.user_id}, book_id='{self.book_id}', rating={self.rating})>"
