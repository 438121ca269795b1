"""
Books Router

Read-only access to the external catalog (Google Books).

Endpoints:
- GET /books/search - Search the catalog (query, optional category/author)
- GET /books/{book_id} - One catalog book

Catalog failures are reported as 500 with the standard envelope.
"""

import math

from fastapi import APIRouter, Query, Request

from bookhaven.dependencies import Catalog
from bookhaven.exceptions import InvalidInputError, NotFoundError
from bookhaven.schemas.book import BookResponse, CatalogSearchResponse
from bookhaven.schemas.common import APIResponse, PaginationMeta, ok
from bookhaven.services.google_books import MAX_RESULTS_PER_PAGE

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={404: {"description": "Book not found"}},
)


@router.get(
    "/search",
    response_model=APIResponse[CatalogSearchResponse],
    summary="Search the catalog",
    description="""
    Full-text search over the external catalog.

    - **query**: Search terms (required)
    - **category**: Restrict to a subject
    - **author**: Restrict to an author
    """,
)
def search_books(
    request: Request,
    catalog: Catalog,
    query: str = Query(default="", max_length=200, description="Search terms"),
    category: str | None = Query(default=None, max_length=100, description="Subject filter"),
    author: str | None = Query(default=None, max_length=100, description="Author filter"),
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(default=20, ge=1, le=MAX_RESULTS_PER_PAGE, description="Results per page"),
) -> dict:
    if not query.strip():
        raise InvalidInputError("Query is required")

    result = catalog.search(query, category=category, author=author, page=page, limit=limit)
    total = result["total"]

    return ok(
        CatalogSearchResponse(
            books=[BookResponse(**book) for book in result["books"]],
            pagination=PaginationMeta(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit) if total > 0 else 0,
            ),
        )
    )


@router.get(
    "/{book_id}",
    response_model=APIResponse[BookResponse],
    summary="Get a catalog book",
    description="Look up one book by its external catalog identifier.",
)
def get_book(
    request: Request,
    book_id: str,
    catalog: Catalog,
) -> dict:
    book = catalog.get_volume(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return ok(BookResponse(**book))
