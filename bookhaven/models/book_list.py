"""
Book List Models

A user's named shelves ("want to read", "currently reading", "read", plus any
they create) and the books placed on them.

Business Rules:
- List names are unique per user (the same name is fine for another user)
- A book appears at most once per list
- Entries are presented newest first
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.book import Book
    from bookhaven.models.user import User


DEFAULT_LIST_NAMES = ("want to read", "currently reading", "read")


class BookListEntry(Base):
    """
    Join row between a list and a mirrored book.

    Attributes:
        id: Primary key
        book_list_id: Foreign key to book_lists
        book_id: Foreign key to books (external identifier)
        added_at: When the book was placed on the list
    """

    __tablename__ = "book_list_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    book_list_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("book_lists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )

    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    book_list: Mapped["BookList"] = relationship("BookList", back_populates="entries")
    book: Mapped["Book"] = relationship("Book", back_populates="entries")

    __table_args__ = (
        UniqueConstraint("book_list_id", "book_id", name="uq_book_list_entry"),
    )

    def __repr__(self) -> str:
        return f"<BookListEntry(list={self.book_list_id}, book='{self.book_id}')>"


class BookList(Base):
    """
    A named list owned by one user.

    Attributes:
        id: Primary key
        user_id: Owner
        name: Display name, unique per owner
        created_at: Creation time (lists are returned oldest first)
        entries: Books on the list, newest first
    """

    __tablename__ = "book_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="List name, unique per user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="book_lists")
    entries: Mapped[list[BookListEntry]] = relationship(
        BookListEntry,
        back_populates="book_list",
        order_by=(BookListEntry.added_at.desc(), BookListEntry.id.desc()),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_book_list_user_name"),
    )

    def __repr__(self) -> str:
        return f"<BookList(id={self.id}, user_id={self.user_id}, name='{self.name}')>"
