"""
Post Models

Community posts (optionally about a book) and the comments under them.

Business Rules:
- Only the author may edit or delete a post
- Deleting a post deletes its comments
- book_title / book_author / book_id are free text, not a foreign key
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhaven.database import Base

if TYPE_CHECKING:
    from bookhaven.models.user import User


class Post(Base):
    """
    A post written by a user.

    Attributes:
        id: Primary key
        user_id: Author
        title: Headline
        content: Body text
        book_title, book_author, book_id: Optional book the post is about
        created_at / updated_at: Timestamps
        comments: PostComment rows, oldest first
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    book_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    book_author: Mapped[str | None] = mapped_column(String(500), nullable=True)
    book_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="External catalog identifier, not enforced",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="posts")
    comments: Mapped[list["PostComment"]] = relationship(
        "PostComment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id}, title='{self.title[:30]}')>"


class PostComment(Base):
    """A comment under a post."""

    __tablename__ = "post_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    post: Mapped["Post"] = relationship("Post", back_populates="comments")
    user: Mapped["User"] = relationship("User", back_populates="post_comments")

    def __repr__(self) -> str:
        return f"<PostComment(id={self.id}, post_id={self.post_id})>"
