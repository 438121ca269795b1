"""
SQLAlchemy Models Package

This package contains all database models for the BookHaven API.
Models are SQLAlchemy ORM classes that map to database tables.

Model Relationships:
- User <-> UserProfile: One-to-One (created together at registration)
- User -> FavoriteGenre: One-to-Many (replaced wholesale on profile update)
- Book -> BookCategory: lowercased category tags used for genre matching
- User -> BookList -> BookListEntry <- Book: a user's named lists and the
  mirrored books placed in them
- User -> BookRating <- Book: one rating per (user, book)
- User -> Comment <- Book: comments on a book
- User -> Post -> PostComment: community posts and their comments

Import all models here to:
1. Make them available as: from bookhaven.models import Book, BookList
2. Ensure Alembic discovers them for migrations
3. Provide a single import point for the application
"""

# The order matters for SQLAlchemy to resolve relationships
from bookhaven.models.user import FavoriteGenre, User, UserProfile
from bookhaven.models.book import Book, BookCategory
from bookhaven.models.book_list import BookList, BookListEntry
from bookhaven.models.rating import BookRating
from bookhaven.models.comment import Comment
from bookhaven.models.post import Post, PostComment

__all__ = [
    "User",
    "UserProfile",
    "FavoriteGenre",
    "Book",
    "BookCategory",
    "BookList",
    "BookListEntry",
    "BookRating",
    "Comment",
    "Post",
    "PostComment",
]
