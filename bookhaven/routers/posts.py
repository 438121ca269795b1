"""
Posts Router

Community posts and the comments under them.

Endpoints:
- GET /posts - Paginated posts, newest first (optionally by one user)
- POST /posts - Write a post
- GET /posts/{post_id} - One post
- PUT /posts/{post_id} - Edit own post
- DELETE /posts/{post_id} - Delete own post (and its comments)
- GET /posts/{post_id}/comments - Comments, oldest first
- POST /posts/{post_id}/comments - Comment on a post

Business Rules:
- Only the author may edit or delete a post (403 otherwise)
- An edit must change at least one field
"""

import logging
import math

from fastapi import APIRouter, Query, Request, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from bookhaven.dependencies import CurrentUser, DbSession, Pagination
from bookhaven.exceptions import ForbiddenError, NotFoundError
from bookhaven.models import Post, PostComment
from bookhaven.schemas.comment import PostCommentCreate, PostCommentResponse
from bookhaven.schemas.common import APIResponse, PaginationMeta, ok
from bookhaven.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from bookhaven.services.rate_limiter import WRITE_LIMIT, limiter

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
    responses={404: {"description": "Post not found"}},
)


# =============================================================================
# Helper Functions
# =============================================================================


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.execute(
        select(Post)
        .options(selectinload(Post.user), selectinload(Post.comments))
        .where(Post.id == post_id)
    ).scalar_one_or_none()

    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_own_post(db: Session, post_id: int, user_id: int) -> Post:
    post = get_post_or_404(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenError("You can only modify your own posts")
    return post


# =============================================================================
# Posts
# =============================================================================


@router.get(
    "",
    response_model=APIResponse[PostListResponse],
    summary="List posts",
)
def list_posts(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    user_id: int | None = Query(default=None, ge=1, description="Only posts by this user"),
) -> dict:
    count_stmt = select(func.count(Post.id))
    stmt = (
        select(Post)
        .options(selectinload(Post.user), selectinload(Post.comments))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(pagination.skip)
        .limit(pagination.limit)
    )
    if user_id is not None:
        count_stmt = count_stmt.where(Post.user_id == user_id)
        stmt = stmt.where(Post.user_id == user_id)

    total = db.execute(count_stmt).scalar() or 0
    posts = db.execute(stmt).scalars().all()

    return ok(
        PostListResponse(
            posts=[PostResponse.from_post(post) for post in posts],
            pagination=PaginationMeta(
                page=pagination.page,
                limit=pagination.limit,
                total=total,
                total_pages=math.ceil(total / pagination.limit) if total > 0 else 0,
            ),
        )
    )


@router.post(
    "",
    response_model=APIResponse[PostResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Write a post",
)
@limiter.limit(WRITE_LIMIT)
def create_post(
    request: Request,
    post_data: PostCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    post = Post(user_id=current_user.id, **post_data.model_dump())
    db.add(post)
    db.commit()

    logger.info(f"User {current_user.id} created post {post.id}")
    return ok(PostResponse.from_post(get_post_or_404(db, post.id)), message="Post created")


@router.get(
    "/{post_id}",
    response_model=APIResponse[PostResponse],
    summary="Get a post",
)
def get_post(
    request: Request,
    post_id: int,
    db: DbSession,
) -> dict:
    return ok(PostResponse.from_post(get_post_or_404(db, post_id)))


@router.put(
    "/{post_id}",
    response_model=APIResponse[PostResponse],
    summary="Edit a post",
    responses={403: {"description": "Not the author"}},
)
@limiter.limit(WRITE_LIMIT)
def update_post(
    request: Request,
    post_id: int,
    post_data: PostUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    post = get_own_post(db, post_id, current_user.id)

    for field, value in post_data.model_dump(exclude_unset=True).items():
        # title and content cannot be cleared
        if value is None and field in ("title", "content"):
            continue
        setattr(post, field, value)

    db.commit()
    return ok(PostResponse.from_post(get_post_or_404(db, post_id)), message="Post updated")


@router.delete(
    "/{post_id}",
    response_model=APIResponse[None],
    summary="Delete a post",
    responses={403: {"description": "Not the author"}},
)
@limiter.limit(WRITE_LIMIT)
def delete_post(
    request: Request,
    post_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    post = get_own_post(db, post_id, current_user.id)
    db.delete(post)
    db.commit()

    logger.info(f"User {current_user.id} deleted post {post_id}")
    return ok(message="Post deleted")


# =============================================================================
# Post Comments
# =============================================================================


@router.get(
    "/{post_id}/comments",
    response_model=APIResponse[list[PostCommentResponse]],
    summary="Get comments on a post",
)
def list_post_comments(
    request: Request,
    post_id: int,
    db: DbSession,
) -> dict:
    get_post_or_404(db, post_id)
    comments = db.execute(
        select(PostComment)
        .options(selectinload(PostComment.user))
        .where(PostComment.post_id == post_id)
        .order_by(PostComment.created_at.asc(), PostComment.id.asc())
    ).scalars().all()
    return ok([PostCommentResponse.model_validate(c) for c in comments])


@router.post(
    "/{post_id}/comments",
    response_model=APIResponse[PostCommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
@limiter.limit(WRITE_LIMIT)
def create_post_comment(
    request: Request,
    post_id: int,
    comment_data: PostCommentCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    get_post_or_404(db, post_id)

    comment = PostComment(
        post_id=post_id,
        user_id=current_user.id,
        content=comment_data.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    return ok(PostCommentResponse.model_validate(comment), message="Comment added")
