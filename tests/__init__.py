"""
Test Suite for the BookHaven API

Test Organization:
- conftest.py: Shared fixtures (per-test app and database, client, users)
- test_auth.py: Registration, login, token resolution
- test_users.py: Profiles
- test_book_lists.py: Lists and list membership
- test_ratings.py: Ratings and mean rating upkeep
- test_recommendations.py: Recommendation pipeline
- test_catalog.py / test_books.py: Catalog mirror and Google Books client
- test_comments.py / test_posts.py: Community features
- test_main.py: Envelope, error mapping, service endpoints

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_ratings.py

    # Run with verbose output
    pytest -v
"""
