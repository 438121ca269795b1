"""
Book Lists Router

The authenticated user's named lists and the books on them.

Endpoints:
- GET /booklists - All own lists, oldest first, books newest first
- POST /booklists - Create a list
- GET /booklists/{list_id} - One list
- DELETE /booklists/{list_id} - Delete a list and its entries
- POST /booklists/{list_id}/books - Add a catalog book
- DELETE /booklists/{list_id}/books?book_id= - Remove a book

Lists owned by someone else answer 404, exactly like lists that don't exist.
A non-numeric list_id is a 400.
"""

from fastapi import APIRouter, Query, Request, status

from bookhaven.dependencies import CurrentUser, DbSession
from bookhaven.schemas.book_list import (
    AddBookRequest,
    BookListCreate,
    BookListEntryResponse,
    BookListResponse,
)
from bookhaven.schemas.common import APIResponse, ok
from bookhaven.services import book_lists as lists_service
from bookhaven.services.rate_limiter import WRITE_LIMIT, limiter

router = APIRouter(
    prefix="/booklists",
    tags=["Book Lists"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "List not found"},
    },
)


@router.get(
    "",
    response_model=APIResponse[list[BookListResponse]],
    summary="List own book lists",
)
def list_book_lists(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    book_lists = lists_service.get_user_lists(db, current_user)
    return ok([BookListResponse.model_validate(book_list) for book_list in book_lists])


@router.post(
    "",
    response_model=APIResponse[BookListResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a list",
    description="Create a named list. Names are trimmed and unique per user.",
    responses={409: {"description": "A list with this name already exists"}},
)
@limiter.limit(WRITE_LIMIT)
def create_book_list(
    request: Request,
    list_data: BookListCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    book_list = lists_service.create_list(db, current_user, list_data.name)
    return ok(BookListResponse.model_validate(book_list), message="List created")


@router.get(
    "/{list_id}",
    response_model=APIResponse[BookListResponse],
    summary="Get a list",
)
def get_book_list(
    request: Request,
    list_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    book_list = lists_service.get_user_list(db, current_user, list_id)
    return ok(BookListResponse.model_validate(book_list))


@router.delete(
    "/{list_id}",
    response_model=APIResponse[None],
    summary="Delete a list",
)
@limiter.limit(WRITE_LIMIT)
def delete_book_list(
    request: Request,
    list_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    lists_service.delete_list(db, current_user, list_id)
    return ok(message="List deleted")


@router.post(
    "/{list_id}/books",
    response_model=APIResponse[BookListEntryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a book to a list",
    description="Adds a catalog book to the list and mirrors its data locally.",
    responses={409: {"description": "Book is already in this list"}},
)
@limiter.limit(WRITE_LIMIT)
def add_book_to_list(
    request: Request,
    list_id: int,
    book_data: AddBookRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    entry = lists_service.add_book(db, current_user, list_id, book_data)
    return ok(BookListEntryResponse.model_validate(entry), message="Book added to list")


@router.delete(
    "/{list_id}/books",
    response_model=APIResponse[None],
    summary="Remove a book from a list",
)
@limiter.limit(WRITE_LIMIT)
def remove_book_from_list(
    request: Request,
    list_id: int,
    db: DbSession,
    current_user: CurrentUser,
    book_id: str = Query(..., min_length=1, description="External catalog identifier"),
) -> dict:
    lists_service.remove_book(db, current_user, list_id, book_id)
    return ok(message="Book removed from list")
