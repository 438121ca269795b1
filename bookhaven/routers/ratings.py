"""
Ratings Router

Star ratings of catalog books.

Endpoints:
- GET /ratings?book_id=&user_id= - Ratings of a book with live average
- POST /ratings - Rate a book (replaces an earlier rating)
- DELETE /ratings?book_id= - Remove own rating

Business Rules:
- Ratings are whole stars 1-5; fractions are floored, out-of-range is a 400
- One rating per user per book
- Rating a book stores the new mean on the book in the same commit
"""

from fastapi import APIRouter, Query, Request, status

from bookhaven.dependencies import CurrentUser, DbSession, OptionalUser
from bookhaven.schemas.common import APIResponse, ok
from bookhaven.schemas.rating import BookRatingsResponse, RatingCreate, RatingResult
from bookhaven.services.rate_limiter import WRITE_LIMIT, limiter
from bookhaven.services.ratings import get_book_ratings, rate_book, unrate_book

router = APIRouter(
    prefix="/ratings",
    tags=["Ratings"],
    responses={
        400: {"description": "Invalid rating"},
        401: {"description": "Not authenticated"},
    },
)


@router.get(
    "",
    response_model=APIResponse[BookRatingsResponse],
    summary="Get a book's ratings",
    description="""
    All ratings of a book, their average (0 when unrated) and count.

    `user_rating` is the rating of `user_id`, or of the caller when a
    token is sent and `user_id` is omitted.
    """,
)
def list_ratings(
    request: Request,
    db: DbSession,
    current_user: OptionalUser,
    book_id: str = Query(..., min_length=1, description="External catalog identifier"),
    user_id: int | None = Query(default=None, ge=1, description="User whose rating to report"),
) -> dict:
    if user_id is None and current_user is not None:
        user_id = current_user.id
    return ok(BookRatingsResponse(**get_book_ratings(db, book_id, user_id)))


@router.post(
    "",
    response_model=APIResponse[RatingResult],
    status_code=status.HTTP_201_CREATED,
    summary="Rate a book",
)
@limiter.limit(WRITE_LIMIT)
def create_rating(
    request: Request,
    rating_data: RatingCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    result = rate_book(db, current_user, rating_data.book_id, rating_data.rating)
    return ok(RatingResult(**result), message="Rating saved")


@router.delete(
    "",
    response_model=APIResponse[None],
    summary="Remove own rating",
    responses={404: {"description": "Rating not found"}},
)
@limiter.limit(WRITE_LIMIT)
def delete_rating(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    book_id: str = Query(..., min_length=1, description="External catalog identifier"),
) -> dict:
    unrate_book(
        db,
        current_user,
        book_id,
        recompute=request.app.state.settings.recompute_average_on_unrate,
    )
    return ok(message="Rating removed")
