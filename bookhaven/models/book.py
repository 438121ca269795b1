"""
Book Model

Local mirror of books encountered in the external catalog (Google Books).

The primary key is the external catalog identifier itself, so a book is
created lazily the first time anything references it (added to a list,
rated, commented on) and upserted whenever richer data arrives.

Categories
==========
Book.categories keeps the catalog's tags as given (a JSON array) for
display. Each assignment also rewrites book_categories, one lowercased row
per distinct tag, which is what genre matching queries.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.book_list import BookListEntry
    from bookhaven.models.comment import Comment
    from bookhaven.models.rating import BookRating


class Book(Base):
    """
    Mirrored catalog book.

    Attributes:
        id: External catalog identifier (primary key)
        title: Book title
        authors: Display string of authors, e.g. "Terry Pratchett, Neil Gaiman"
        image: Cover thumbnail URL
        description: Synopsis
        categories: List of category tags
        average_rating: Mean of all BookRating rows (None until rated or
            supplied by the catalog)
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="External catalog identifier",
    )

    # -------------------------------------------------------------------------
    # Catalog Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title",
    )

    authors: Mapped[str] = mapped_column(
        String(500),
        default="",
        nullable=False,
        comment="Comma-separated author names",
    )

    image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cover image URL",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book synopsis",
    )

    categories: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Category tags from the catalog",
    )

    average_rating: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
        index=True,
        comment="Mean rating, recomputed from book_ratings",
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
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

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    entries: Mapped[list["BookListEntry"]] = relationship(
        "BookListEntry",
        back_populates="book",
    )

    ratings: Mapped[list["BookRating"]] = relationship(
        "BookRating",
        back_populates="book",
    )

    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="book",
    )

    category_index: Mapped[list["BookCategory"]] = relationship(
        "BookCategory",
        cascade="all, delete-orphan",
    )

    @validates("categories")
    def _index_categories(self, key: str, categories: list[str]) -> list[str]:
        names = {name.strip().lower() for name in categories or [] if name and name.strip()}
        # Reuse surviving rows so no (book_id, name) is deleted and re-inserted
        current = {row.name: row for row in self.category_index}
        self.category_index = [current.get(name) or BookCategory(name=name) for name in sorted(names)]
        return categories

    def __repr__(self) -> str:
        return f"<Book(id='{self.id}', title='{self.title[:30]}')>"


class BookCategory(Base):
    """
    One lowercased category tag of a book.

    Maintained from Book.categories; never written directly.
    """

    __tablename__ = "book_categories"

    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        index=True,
        comment="Lowercased category tag",
    )

    def __repr__(self) -> str:
        return f"<BookCategory(book_id='{self.book_id}', name='{self.name}')>"
