"""
Users Router

Profile and recommendation endpoints.

Endpoints:
- GET /users/profile - Own profile with every list
- PUT /users/profile - Update username, bio and favorite genres
- GET /users/recommendations - Books picked from favorite genres
- GET /users/{user_id}/profile - Public profile

Business Rules:
- A new username must not belong to someone else
- favorite_genres replaces the whole set
- Public profiles show each list's size and its 10 newest books
"""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import select

from bookhaven.dependencies import CurrentUser, DbSession, OptionalCatalog
from bookhaven.exceptions import ConflictError, NotFoundError
from bookhaven.models import FavoriteGenre, User, UserProfile
from bookhaven.schemas.book import BookResponse
from bookhaven.schemas.common import APIResponse, ok
from bookhaven.schemas.user import (
    ProfileResponse,
    ProfileUpdate,
    PublicBookList,
    PublicProfileResponse,
    PublicUser,
)
from bookhaven.services.book_lists import get_user_lists
from bookhaven.services.rate_limiter import WRITE_LIMIT, limiter
from bookhaven.services.recommendations import recommend

logger = logging.getLogger(__name__)

RECENT_BOOKS_PER_LIST = 10

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)


@router.get(
    "/profile",
    response_model=APIResponse[ProfileResponse],
    summary="Get own profile",
    description="The authenticated user's profile, favorite genres and lists.",
)
def get_profile(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    book_lists = get_user_lists(db, current_user)
    return ok(ProfileResponse.from_user(current_user, book_lists))


@router.put(
    "/profile",
    response_model=APIResponse[ProfileResponse],
    summary="Update own profile",
    description="Change username and bio, or replace the favorite genres.",
)
@limiter.limit(WRITE_LIMIT)
def update_profile(
    request: Request,
    profile_data: ProfileUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    """
    Update the current user's profile.

    Only fields present in the body are changed.
    """
    updates = profile_data.model_dump(exclude_unset=True)

    username = updates.get("username")
    if username and username != current_user.username:
        taken = db.execute(
            select(User.id).where(User.username == username, User.id != current_user.id)
        ).scalar_one_or_none()
        if taken is not None:
            raise ConflictError("Username already taken")
        current_user.username = username

    if "bio" in updates:
        if current_user.profile is None:
            current_user.profile = UserProfile()
        current_user.profile.bio = updates["bio"]

    genres = updates.get("favorite_genres")
    if genres is not None:
        # delete-orphan cascade removes every previous row
        current_user.favorite_genres = [FavoriteGenre(name=name) for name in genres]

    db.commit()
    db.refresh(current_user)

    logger.info(f"User {current_user.id} updated profile fields: {sorted(updates)}")

    book_lists = get_user_lists(db, current_user)
    return ok(ProfileResponse.from_user(current_user, book_lists), message="Profile updated")


@router.get(
    "/recommendations",
    response_model=APIResponse[list[BookResponse]],
    summary="Get recommendations",
    description="""
    Up to 10 books the user has not put on any list, from their favorite
    genres, topped up from the catalog and backfilled with well-rated books.
    """,
)
def get_recommendations(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    catalog: OptionalCatalog,
) -> dict:
    books = recommend(db, current_user, request.app.state.settings, catalog)
    return ok([BookResponse.model_validate(book) for book in books])


@router.get(
    "/{user_id}/profile",
    response_model=APIResponse[PublicProfileResponse],
    summary="Get a public profile",
    description="Another member's bio, favorite genres and lists.",
)
def get_public_profile(
    request: Request,
    user_id: int,
    db: DbSession,
) -> dict:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    book_lists = get_user_lists(db, user)
    profile = PublicProfileResponse(
        user=PublicUser(
            id=user.id,
            username=user.username,
            bio=user.profile.bio if user.profile else None,
            favorite_genres=user.genre_names,
            total_lists=len(book_lists),
        ),
        book_lists=[
            PublicBookList(
                id=book_list.id,
                name=book_list.name,
                created_at=book_list.created_at,
                total_books=len(book_list.entries),
                recent_books=[
                    BookResponse.model_validate(entry.book)
                    for entry in book_list.entries[:RECENT_BOOKS_PER_LIST]
                ],
            )
            for book_list in book_lists
        ],
    )
    return ok(profile)
