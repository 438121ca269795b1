"""
Comments Router

Comments on catalog books.

Endpoints:
- GET /comments?book_id= - Comments on a book, newest first
- POST /comments - Comment on a book (mirrors it as a placeholder if unseen)
"""

import logging

from fastapi import APIRouter, Query, Request, status
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from bookhaven.dependencies import CurrentUser, DbSession
from bookhaven.models import Comment
from bookhaven.schemas.comment import CommentCreate, CommentResponse
from bookhaven.schemas.common import APIResponse, ok
from bookhaven.services.catalog import get_or_create_stub
from bookhaven.services.rate_limiter import WRITE_LIMIT, limiter

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/comments",
    tags=["Comments"],
)


@router.get(
    "",
    response_model=APIResponse[list[CommentResponse]],
    summary="Get comments on a book",
)
def list_comments(
    request: Request,
    db: DbSession,
    book_id: str = Query(..., min_length=1, description="External catalog identifier"),
) -> dict:
    comments = db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.book_id == book_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    ).scalars().all()
    return ok([CommentResponse.model_validate(c) for c in comments])


@router.post(
    "",
    response_model=APIResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a book",
)
@limiter.limit(WRITE_LIMIT)
def create_comment(
    request: Request,
    comment_data: CommentCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> dict:
    get_or_create_stub(db, comment_data.book_id)

    comment = Comment(
        user_id=current_user.id,
        book_id=comment_data.book_id,
        content=comment_data.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    logger.info(f"User {current_user.id} commented on {comment.book_id}")
    return ok(CommentResponse.model_validate(comment), message="Comment added")
