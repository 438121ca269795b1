"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

WHY Routers?
============
1. Organization: Group related endpoints together
2. Modularity: Each router can have its own prefix, tags, dependencies
3. Maintainability: Easy to find and modify endpoint code

Router Structure:
- auth.py: /api/v1/auth/* (registration, login, current user)
- users.py: /api/v1/users/* (profiles, recommendations)
- books.py: /api/v1/books/* (external catalog search and lookup)
- book_lists.py: /api/v1/booklists/* (personal lists)
- ratings.py: /api/v1/ratings
- comments.py: /api/v1/comments
- posts.py: /api/v1/posts/* (community posts and their comments)

Each router is imported and registered in main.py.
"""

from bookhaven.routers.auth import router as auth_router
from bookhaven.routers.book_lists import router as book_lists_router
from bookhaven.routers.books import router as books_router
from bookhaven.routers.comments import router as comments_router
from bookhaven.routers.posts import router as posts_router
from bookhaven.routers.ratings import router as ratings_router
from bookhaven.routers.users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "books_router",
    "book_lists_router",
    "ratings_router",
    "comments_router",
    "posts_router",
]
