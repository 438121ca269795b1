"""
Ratings Service

One rating per (user, book), and the book's mean rating kept in step with
the rating rows.

Book.average_rating is always recomputed from every current rating of the
book (AVG over book_ratings), never adjusted incrementally. Rating a book
writes the rating and the new mean in one commit.
"""

import logging
import math

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookhaven.exceptions import InvalidInputError, NotFoundError
from bookhaven.models import Book, BookRating, User
from bookhaven.services.catalog import get_or_create_stub

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def normalize_rating(value: float) -> int:
    """
    Validate a submitted rating and floor it to whole stars.

    Raises:
        InvalidInputError: Value outside 1-5 (checked before flooring, so
            5.5 is rejected and 4.9 becomes 4)
    """
    if value is None or math.isnan(value) or value < MIN_RATING or value > MAX_RATING:
        raise InvalidInputError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return math.floor(value)


def aggregate_ratings(db: Session, book_id: str) -> tuple[float, int]:
    """Mean and count of the book's ratings; (0.0, 0) when unrated."""
    stmt = select(
        func.avg(BookRating.rating),
        func.count(BookRating.id),
    ).where(BookRating.book_id == book_id)

    avg_rating, count = db.execute(stmt).one()
    return (float(avg_rating) if avg_rating is not None else 0.0), count


def recalculate_book_rating(db: Session, book_id: str) -> tuple[float, int]:
    """
    Write the book's current mean rating to Book.average_rating.

    Does not commit. A book left with no ratings gets None.

    Returns:
        (average, count)
    """
    average, count = aggregate_ratings(db, book_id)

    book = db.get(Book, book_id)
    if book is not None:
        book.average_rating = average if count else None

    return average, count


def find_rating(db: Session, user_id: int, book_id: str) -> BookRating | None:
    return db.execute(
        select(BookRating).where(
            BookRating.user_id == user_id,
            BookRating.book_id == book_id,
        )
    ).scalar_one_or_none()


def _write_rating(db: Session, user_id: int, book_id: str, rating: int) -> tuple[float, int]:
    get_or_create_stub(db, book_id)

    existing = find_rating(db, user_id, book_id)
    if existing is None:
        db.add(BookRating(user_id=user_id, book_id=book_id, rating=rating))
    else:
        existing.rating = rating
    db.flush()

    average, count = recalculate_book_rating(db, book_id)
    db.commit()
    return average, count


def rate_book(db: Session, user: User, book_id: str, value: float) -> dict:
    """
    Rate a book, replacing the user's earlier rating if there is one.

    The book is mirrored as a placeholder when this is the first time its
    id is seen. A concurrent first rating (or first mirror) of the same
    book that wins the unique constraint is retried once as an update.

    Returns:
        {"rating": int, "average": float, "count": int}

    Raises:
        InvalidInputError: Rating outside 1-5
    """
    rating = normalize_rating(value)
    user_id = user.id

    try:
        average, count = _write_rating(db, user_id, book_id, rating)
    except IntegrityError:
        db.rollback()
        logger.info(f"Rating of {book_id} by user {user_id} raced another write, retrying")
        average, count = _write_rating(db, user_id, book_id, rating)

    logger.info(f"User {user_id} rated {book_id} {rating} (avg {average:.2f}, n={count})")
    return {"rating": rating, "average": average, "count": count}


def unrate_book(db: Session, user: User, book_id: str, recompute: bool = False) -> None:
    """
    Remove the user's rating of a book.

    The book's stored mean is left as it was unless `recompute` is set
    (settings.recompute_average_on_unrate).

    Raises:
        NotFoundError: The user has not rated this book
    """
    result = db.execute(
        delete(BookRating).where(
            BookRating.user_id == user.id,
            BookRating.book_id == book_id,
        )
    )
    if result.rowcount == 0:
        raise NotFoundError("Rating not found")

    if recompute:
        recalculate_book_rating(db, book_id)
    db.commit()

    logger.info(f"User {user.id} removed rating of {book_id}")


def get_book_ratings(db: Session, book_id: str, user_id: int | None = None) -> dict:
    """
    Every rating of a book with the live aggregate.

    Args:
        book_id: External catalog identifier
        user_id: When given, that user's rating is returned as user_rating

    Returns:
        {"ratings": [...], "average": float, "count": int, "user_rating": int | None}
    """
    rows = db.execute(
        select(BookRating, User.username)
        .join(User, User.id == BookRating.user_id)
        .where(BookRating.book_id == book_id)
        .order_by(BookRating.updated_at.desc(), BookRating.id.desc())
    ).all()

    ratings = [
        {
            "user_id": rating.user_id,
            "username": username,
            "rating": rating.rating,
            "updated_at": rating.updated_at,
        }
        for rating, username in rows
    ]
    count = len(ratings)
    average = sum(r["rating"] for r in ratings) / count if count else 0.0

    user_rating = None
    if user_id is not None:
        user_rating = next((r["rating"] for r in ratings if r["user_id"] == user_id), None)

    return {
        "ratings": ratings,
        "average": average,
        "count": count,
        "user_rating": user_rating,
    }
