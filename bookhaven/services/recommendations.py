"""
Recommendations Service

Rule-based recommendations from a user's favorite genres.

Strategy:
1. Exclusion set: every book already on any of the user's lists
2. Genre matches: mirrored books whose categories share a favorite genre,
   highest average rating first
3. Catalog top-up: when genre matches are thin, ask the external catalog
   for books by subject and mirror what it returns
4. Backfill: when still short, add globally well-rated mirrored books

A recommended book is never in the exclusion set, whichever step found it.
"""

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookhaven.config import Settings
from bookhaven.exceptions import UpstreamError
from bookhaven.models import Book, BookCategory, User
from bookhaven.services.book_lists import excluded_book_ids
from bookhaven.services.catalog import upsert_book
from bookhaven.services.google_books import subject_for_genre

logger = logging.getLogger(__name__)


class SubjectCatalog(Protocol):
    def search_subject(self, subject: str, max_results: int = 6) -> list[dict]: ...


def _by_rating():
    return (Book.average_rating.desc().nulls_last(), Book.id.asc())


def genre_matches(
    db: Session,
    genres: list[str],
    exclude: set[str],
    limit: int,
) -> list[Book]:
    """
    Mirrored books sharing at least one category with `genres`.

    Matching ignores case; it runs against the lowercased book_categories
    rows, so filtering, ordering and the limit all happen in the database.
    """
    wanted = sorted({genre.strip().lower() for genre in genres if genre.strip()})
    if not wanted or limit <= 0:
        return []

    matching_ids = select(BookCategory.book_id).where(BookCategory.name.in_(wanted))
    stmt = select(Book).where(Book.id.in_(matching_ids)).order_by(*_by_rating())
    if exclude:
        stmt = stmt.where(Book.id.not_in(sorted(exclude)))
    return list(db.execute(stmt.limit(limit)).scalars())


def catalog_top_up(
    db: Session,
    catalog: SubjectCatalog,
    genres: list[str],
    exclude: set[str],
    limit: int,
    max_genres: int = 12,
    per_genre: int = 6,
) -> list[Book]:
    """
    Fetch books by subject for each favorite genre and mirror them.

    Catalog failures for a genre are logged and that genre is skipped.
    Books already mirrored keep their stored average rating.
    """
    found: list[Book] = []
    seen = set(exclude)

    for genre in genres[:max_genres]:
        if len(found) >= limit:
            break
        subject = subject_for_genre(genre)
        try:
            hits = catalog.search_subject(subject, max_results=per_genre)
        except UpstreamError as e:
            logger.warning(f"Catalog top-up skipped genre '{genre}': {e.message}")
            continue

        for hit in hits:
            if hit["id"] in seen:
                continue
            seen.add(hit["id"])

            fields = {
                "title": hit["title"],
                "authors": hit["authors"],
                "image": hit.get("image"),
                "description": hit.get("description"),
                "categories": hit.get("categories") or [genre],
            }
            if db.get(Book, hit["id"]) is None and hit.get("average_rating") is not None:
                fields["average_rating"] = hit["average_rating"]

            found.append(upsert_book(db, hit["id"], **fields))
            if len(found) >= limit:
                break

    logger.debug(f"Catalog top-up found {len(found)} books for genres {genres[:max_genres]}")
    return found


def popular_books(
    db: Session,
    exclude: set[str],
    min_rating: float,
    limit: int,
) -> list[Book]:
    """Best-rated mirrored books at or above `min_rating`, excluding `exclude`."""
    if limit <= 0:
        return []

    stmt = select(Book).where(Book.average_rating >= min_rating).order_by(*_by_rating())
    if exclude:
        stmt = stmt.where(Book.id.not_in(sorted(exclude)))
    return list(db.execute(stmt.limit(limit)).scalars())


def recommend(
    db: Session,
    user: User,
    settings: Settings,
    catalog: SubjectCatalog | None = None,
) -> list[Book]:
    """
    Recommend up to settings.recommendation_limit unseen books.

    Args:
        db: Database session
        user: The user to recommend for
        settings: Tunables (limit, thresholds, catalog toggle)
        catalog: External catalog used for the top-up; skipped when None

    Returns:
        Books, best first. May be shorter than the limit, or empty.
    """
    limit = settings.recommendation_limit
    genres = user.genre_names
    exclude = excluded_book_ids(db, user.id)

    selected = genre_matches(db, genres, exclude, limit)
    logger.debug(f"User {user.id}: {len(selected)} genre matches, {len(exclude)} excluded")

    if (
        settings.recommendation_catalog_enabled
        and catalog is not None
        and genres
        and len(selected) < settings.recommendation_catalog_threshold
    ):
        selected += catalog_top_up(
            db,
            catalog,
            genres,
            exclude | {book.id for book in selected},
            limit - len(selected),
            max_genres=settings.recommendation_catalog_max_genres,
            per_genre=settings.recommendation_catalog_per_genre,
        )

    if len(selected) < settings.recommendation_backfill_threshold:
        selected += popular_books(
            db,
            exclude | {book.id for book in selected},
            settings.recommendation_popular_min_rating,
            limit - len(selected),
        )

    db.commit()

    logger.info(f"Recommended {len(selected)} books to user {user.id}")
    return selected
