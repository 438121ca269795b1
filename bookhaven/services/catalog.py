"""
Catalog Mirror Service

Keeps the local `books` table in step with the external catalog. A row is
created the first time a book id is referenced and updated whenever a caller
brings richer data.

Partial overwrite:
    Only the fields passed to upsert_book() are written. Passing None or an
    empty value writes it; leaving a field out keeps what is stored.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from bookhaven.models import Book

logger = logging.getLogger(__name__)

STUB_TITLE = "external book"

BOOK_FIELDS = ("title", "authors", "image", "description", "categories", "average_rating")


def upsert_book(db: Session, book_id: str, **fields: Any) -> Book:
    """
    Create or update a mirrored book.

    The session is flushed, not committed; the caller owns the transaction.

    Args:
        db: Database session
        book_id: External catalog identifier
        **fields: Any of title, authors, image, description, categories,
            average_rating

    Returns:
        The Book row
    """
    unknown = set(fields) - set(BOOK_FIELDS)
    if unknown:
        raise TypeError(f"Unknown book fields: {sorted(unknown)}")

    if "categories" in fields and fields["categories"] is None:
        fields["categories"] = []

    book = db.get(Book, book_id)
    if book is None:
        fields.setdefault("title", STUB_TITLE)
        fields.setdefault("authors", "")
        fields.setdefault("categories", [])
        book = Book(id=book_id, **fields)
        db.add(book)
        logger.debug(f"Mirrored new book {book_id}")
    else:
        for name, value in fields.items():
            setattr(book, name, value)
        logger.debug(f"Updated mirrored book {book_id}: {sorted(fields)}")

    db.flush()
    return book


def get_or_create_stub(db: Session, book_id: str) -> Book:
    """
    Return the mirrored book, creating a placeholder row if it is unknown.

    Used when a book is rated or commented on before anyone added it to a
    list, so all we know is its id.
    """
    book = db.get(Book, book_id)
    if book is not None:
        return book
    return upsert_book(db, book_id)
