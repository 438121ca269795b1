"""
List Membership Service

Owns a user's named lists and the books placed on them.

Rules:
- Every operation first checks that the list belongs to the caller. A list
  owned by someone else is reported as not found, never as forbidden.
- A list name is unique per user.
- A book appears at most once per list.
- Deleting a list deletes its entries first, explicitly.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from bookhaven.exceptions import ConflictError, NotFoundError
from bookhaven.models import BookList, BookListEntry, User
from bookhaven.schemas.book_list import AddBookRequest
from bookhaven.services.catalog import upsert_book

logger = logging.getLogger(__name__)


def get_user_lists(db: Session, user: User) -> list[BookList]:
    """The user's lists, oldest first, each with entries newest first."""
    stmt = (
        select(BookList)
        .options(selectinload(BookList.entries).selectinload(BookListEntry.book))
        .where(BookList.user_id == user.id)
        .order_by(BookList.created_at.asc(), BookList.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def get_user_list(db: Session, user: User, list_id: int) -> BookList:
    """
    Fetch one of the user's lists.

    Raises:
        NotFoundError: No such list, or it belongs to another user
    """
    book_list = db.execute(
        select(BookList)
        .options(selectinload(BookList.entries).selectinload(BookListEntry.book))
        .where(BookList.id == list_id, BookList.user_id == user.id)
    ).scalar_one_or_none()

    if book_list is None:
        raise NotFoundError("List not found")
    return book_list


def create_list(db: Session, user: User, name: str) -> BookList:
    """
    Create a named list.

    Raises:
        ConflictError: The user already has a list with this name
    """
    name = name.strip()
    existing = db.execute(
        select(BookList.id).where(BookList.user_id == user.id, BookList.name == name)
    ).scalar_one_or_none()
    if existing is not None:
        raise ConflictError("A list with this name already exists")

    book_list = BookList(user_id=user.id, name=name)
    db.add(book_list)
    db.commit()
    db.refresh(book_list)

    logger.info(f"User {user.id} created list {book_list.id} '{name}'")
    return book_list


def delete_list(db: Session, user: User, list_id: int) -> None:
    """
    Delete a list and its entries.

    Raises:
        NotFoundError: No such list for this user
    """
    book_list = get_user_list(db, user, list_id)

    db.execute(delete(BookListEntry).where(BookListEntry.book_list_id == book_list.id))
    db.execute(delete(BookList).where(BookList.id == book_list.id))
    db.commit()

    logger.info(f"User {user.id} deleted list {list_id}")


def add_book(db: Session, user: User, list_id: int, data: AddBookRequest) -> BookListEntry:
    """
    Place a book on a list, mirroring its catalog data.

    The mirror is upserted with the fields the caller sent. A field sent as
    null is written as null; a field left out keeps its stored value.

    Raises:
        NotFoundError: No such list for this user
        ConflictError: The book is already on the list (nothing is written)
    """
    book_list = get_user_list(db, user, list_id)

    existing = db.execute(
        select(BookListEntry.id).where(
            BookListEntry.book_list_id == book_list.id,
            BookListEntry.book_id == data.book_id,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise ConflictError("Book is already in this list")

    fields = data.model_dump(exclude={"book_id"}, exclude_unset=True)
    upsert_book(db, data.book_id, **fields)

    entry = BookListEntry(book_list_id=book_list.id, book_id=data.book_id)
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(f"User {user.id} added book {data.book_id} to list {list_id}")
    return entry


def remove_book(db: Session, user: User, list_id: int, book_id: str) -> None:
    """
    Take a book off a list.

    Raises:
        NotFoundError: No such list for this user, or the book is not on it
    """
    book_list = get_user_list(db, user, list_id)

    result = db.execute(
        delete(BookListEntry).where(
            BookListEntry.book_list_id == book_list.id,
            BookListEntry.book_id == book_id,
        )
    )
    if result.rowcount == 0:
        raise NotFoundError("Book not found in this list")

    db.commit()
    logger.info(f"User {user.id} removed book {book_id} from list {list_id}")


def excluded_book_ids(db: Session, user_id: int) -> set[str]:
    """Ids of every book on any of the user's lists."""
    rows = db.execute(
        select(BookListEntry.book_id)
        .join(BookList, BookList.id == BookListEntry.book_list_id)
        .where(BookList.user_id == user_id)
    ).scalars()
    return set(rows)
