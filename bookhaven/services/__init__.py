"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- auth.py: Registration, login checks and token resolution
- book_lists.py: A user's named lists and their books
- cache.py: Redis caching of external catalog responses
- catalog.py: Local mirror of external catalog books
- google_books.py: Google Books HTTP client
- rate_limiter.py: Rate limiting with slowapi and Redis backend
- ratings.py: One rating per user and book, mean rating upkeep
- recommendations.py: Genre-based recommendations with backfill
- security.py: Password hashing and JWT utilities
"""
