"""
Google Books Client

Read-only access to the external catalog: free-text search, volume lookup
and subject search (used by recommendations to top up genre matches).

One client is built per process in the app lifespan and closed on shutdown.
It wraps an httpx.Client so connections are pooled; tests pass an
httpx.MockTransport instead of touching the network.

Every transport or HTTP failure surfaces as UpstreamError, except a 404 on
a volume lookup, which is an ordinary "not found".
"""

import logging
from typing import Any

import httpx

from bookhaven.config import Settings
from bookhaven.exceptions import UpstreamError
from bookhaven.services.cache import RedisCache, make_cache_key

logger = logging.getLogger(__name__)

# Catalog search capped by the Google Books API
MAX_RESULTS_PER_PAGE = 40

# Display genre -> subject term Google Books indexes well
GENRE_SUBJECTS = {
    "fiction": "fiction",
    "novel": "fiction",
    "romance": "romance",
    "fantasy": "fantasy",
    "science fiction": "science fiction",
    "sci-fi": "science fiction",
    "mystery": "mystery",
    "history": "history",
    "biography": "biography",
    "poetry": "poetry",
    "drama": "drama",
    "adventure": "adventure",
    "horror": "horror",
    "terror": "horror",
    "comedy": "humor",
    "humor": "humor",
    "comic": "comics",
    "comics": "comics",
    "travel": "travel",
    "philosophy": "philosophy",
    "religion": "religion",
    "religious": "religion",
    "self help": "self help",
    "self-help": "self help",
    "business": "business",
    "science": "science",
    "technology": "technology",
    "art": "art",
    "music": "music",
    "cooking": "cooking",
    "health": "health",
    "sports": "sports",
}


def subject_for_genre(genre: str) -> str:
    """Subject term to search for a favorite genre."""
    key = genre.strip().lower()
    return GENRE_SUBJECTS.get(key, key)


def volume_to_book(item: dict[str, Any]) -> dict[str, Any] | None:
    """
    Map a Google Books volume to the book shape used across the API.

    Returns None for volumes without an id or title.
    """
    volume_id = item.get("id")
    info = item.get("volumeInfo") or {}
    title = info.get("title")
    if not volume_id or not title:
        return None

    authors = info.get("authors") or []
    if isinstance(authors, str):
        authors = [authors]
    images = info.get("imageLinks") or {}

    return {
        "id": volume_id,
        "title": title,
        "authors": ", ".join(authors),
        "image": images.get("thumbnail") or images.get("smallThumbnail"),
        "description": info.get("description"),
        "categories": list(info.get("categories") or []),
        "average_rating": info.get("averageRating"),
    }


class GoogleBooksClient:
    """
    Thin synchronous client over the Google Books volumes API.

    Args:
        base_url: API root, e.g. https://www.googleapis.com/books/v1
        api_key: Optional key appended as `key=`
        timeout: Request timeout in seconds
        cache: Optional RedisCache for responses
        cache_ttl: TTL for cached responses
        transport: Custom httpx transport (tests)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        cache: RedisCache | None = None,
        cache_ttl: int = 3600,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"User-Agent": "BookHaven/1.0.0"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, cache: RedisCache | None = None) -> "GoogleBooksClient":
        return cls(
            base_url=settings.google_books_api_url,
            api_key=settings.google_books_api_key,
            timeout=settings.catalog_timeout,
            cache=cache,
            cache_ttl=settings.catalog_cache_ttl,
        )

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------------
    # HTTP plumbing
    # -------------------------------------------------------------------------
    def _get(self, path: str, params: dict[str, Any] | None = None, allow_404: bool = False) -> dict | None:
        params = dict(params or {})
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = self._client.get(path, params=params)
            if allow_404 and response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Google Books returned {e.response.status_code} for {path}")
            raise UpstreamError("Book catalog request failed") from e
        except httpx.HTTPError as e:
            logger.error(f"Google Books request to {path} failed: {e}")
            raise UpstreamError("Book catalog unavailable") from e
        except ValueError as e:
            logger.error(f"Google Books sent invalid JSON for {path}: {e}")
            raise UpstreamError("Book catalog returned an invalid response") from e

    def _cached(self, key: str, fetch):
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
        value = fetch()
        if self.cache is not None and value is not None:
            self.cache.set(key, value, ttl=self.cache_ttl)
        return value

    # -------------------------------------------------------------------------
    # Catalog operations
    # -------------------------------------------------------------------------
    def search(
        self,
        query: str,
        category: str | None = None,
        author: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """
        Free-text search.

        Returns:
            {"books": [book dicts], "total": total items reported by the catalog}
        """
        terms = [query.strip()]
        if category:
            terms.append(f"subject:{category.strip()}")
        if author:
            terms.append(f"inauthor:{author.strip()}")
        q = " ".join(terms)

        limit = min(limit, MAX_RESULTS_PER_PAGE)
        start_index = (page - 1) * limit

        def fetch():
            data = self._get(
                "/volumes",
                {"q": q, "startIndex": start_index, "maxResults": limit},
            )
            books = [book for book in map(volume_to_book, data.get("items") or []) if book]
            return {"books": books, "total": int(data.get("totalItems") or 0)}

        key = make_cache_key("catalog:search", q=q, start=start_index, limit=limit)
        return self._cached(key, fetch)

    def get_volume(self, volume_id: str) -> dict[str, Any] | None:
        """One volume as a book dict, or None when the catalog has no such id."""

        def fetch():
            data = self._get(f"/volumes/{volume_id}", allow_404=True)
            return volume_to_book(data) if data else None

        return self._cached(make_cache_key("catalog:volume", volume_id), fetch)

    def search_subject(self, subject: str, max_results: int = 6) -> list[dict[str, Any]]:
        """
        Books filed under a subject, most relevant first.

        Volumes without authors are skipped.
        """

        def fetch():
            data = self._get(
                "/volumes",
                {
                    "q": f"subject:{subject}",
                    "maxResults": max_results,
                    "orderBy": "relevance",
                    "langRestrict": "en",
                },
            )
            books = [book for book in map(volume_to_book, data.get("items") or []) if book]
            return [book for book in books if book["authors"]]

        key = make_cache_key("catalog:subject", subject, max_results=max_results)
        return self._cached(key, fetch)
