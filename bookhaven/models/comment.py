"""
Comment Model

A short comment left by a user on a mirrored book.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.book import Book
    from bookhaven.models.user import User


class Comment(Base):
    __tablename__ = "comments"

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

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="comments")
    book: Mapped["Book"] = relationship("Book", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, book_id='{self.book_id}', user_id={self.user_id})>"
