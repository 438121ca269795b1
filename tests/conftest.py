"""
pytest Fixtures for BookHaven API Tests

Shared fixtures used across all test files.

Every test gets its own application built by create_app() against a fresh
in-memory SQLite database, so tests never see each other's data:

- app: application with its own engine and session factory
- db_session: the session the test and the request handlers share
- client: TestClient with the catalog replaced by FakeCatalog
- user / other_user: registered members with default lists
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# The shared rate limiter reads process settings at import time
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookhaven.config import Settings
from bookhaven.database import create_tables, get_db
from bookhaven.dependencies import get_catalog, get_optional_catalog
from bookhaven.exceptions import UpstreamError
from bookhaven.main import create_app
from bookhaven.models import Book, User
from bookhaven.schemas.user import RegisterRequest
from bookhaven.services.auth import issue_token, register_user
from bookhaven.services.catalog import upsert_book


# =============================================================================
# FAKE CATALOG
# =============================================================================


class FakeCatalog:
    """
    Stands in for GoogleBooksClient.

    - books: volumes returned by get_volume() and search()
    - subjects: subject -> hits returned by search_subject()
    - failing_subjects: subjects whose lookup raises UpstreamError
    """

    def __init__(self):
        self.books: dict[str, dict] = {}
        self.subjects: dict[str, list[dict]] = {}
        self.failing_subjects: set[str] = set()
        self.subject_calls: list[str] = []
        self.search_calls: list[dict] = []
        self.unavailable = False

    def search(self, query, category=None, author=None, page=1, limit=20):
        if self.unavailable:
            raise UpstreamError("Book catalog unavailable")
        self.search_calls.append(
            {"query": query, "category": category, "author": author, "page": page, "limit": limit}
        )
        matches = [
            book for book in self.books.values()
            if query.lower() in book["title"].lower()
        ]
        start = (page - 1) * limit
        return {"books": matches[start:start + limit], "total": len(matches)}

    def get_volume(self, volume_id):
        if self.unavailable:
            raise UpstreamError("Book catalog unavailable")
        return self.books.get(volume_id)

    def search_subject(self, subject, max_results=6):
        self.subject_calls.append(subject)
        if subject in self.failing_subjects:
            raise UpstreamError("Book catalog unavailable")
        return self.subjects.get(subject, [])[:max_results]


def catalog_book(book_id: str, title: str, authors: str = "Some Author", **extra) -> dict:
    """A book dict shaped like the catalog client's output."""
    book = {
        "id": book_id,
        "title": title,
        "authors": authors,
        "image": None,
        "description": None,
        "categories": [],
        "average_rating": None,
    }
    book.update(extra)
    return book


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for one test application (in-memory SQLite, no Redis)."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        cache_enabled=False,
        rate_limit_enabled=False,
    )


@pytest.fixture
def app(test_settings: Settings) -> Generator[FastAPI, None, None]:
    """
    Application with its own database.

    StaticPool keeps the single in-memory connection alive, so the tables
    created here are the ones every request sees.
    """
    application = create_app(test_settings)
    create_tables(application.state.engine)

    yield application

    application.dependency_overrides.clear()
    application.state.engine.dispose()


@pytest.fixture
def db_session(app: FastAPI) -> Generator[Session, None, None]:
    """Session shared by the test body and the request handlers."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def client(
    app: FastAPI,
    db_session: Session,
    fake_catalog: FakeCatalog,
) -> Generator[TestClient, None, None]:
    """
    Test client for the application.

    get_db is overridden so handlers use the test's session; the catalog
    dependencies return the FakeCatalog instead of calling Google Books.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: fake_catalog
    app.dependency_overrides[get_optional_catalog] = lambda: fake_catalog

    with TestClient(app) as test_client:
        yield test_client
        # Shutdown disposes the engine; release the connection first
        db_session.close()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def make_user(db: Session, username: str, genres: list[str] | None = None) -> User:
    return register_user(
        db,
        RegisterRequest(
            email=f"{username}@example.com",
            password="secret123",
            username=username,
            birthdate=date(1995, 1, 15),
            favorite_genres=genres or [],
        ),
    )


def make_book(
    db: Session,
    book_id: str,
    categories: list[str] | None = None,
    average_rating: float | None = None,
    title: str | None = None,
) -> Book:
    """Mirror a book directly and commit it."""
    book = upsert_book(
        db,
        book_id,
        title=title or f"Book {book_id}",
        authors="Some Author",
        categories=categories or [],
        average_rating=average_rating,
    )
    db.commit()
    return book


def auth_headers_for(user: User, settings: Settings) -> dict:
    """Authorization header carrying a fresh token for the user."""
    return {"Authorization": f"Bearer {issue_token(user, settings)}"}


@pytest.fixture
def user(db_session: Session) -> User:
    """Registered member who likes fantasy and science fiction."""
    return make_user(db_session, "alice", ["Fantasy", "Science Fiction"])


@pytest.fixture
def other_user(db_session: Session) -> User:
    """A second member, for ownership scenarios."""
    return make_user(db_session, "bob", ["Mystery"])


@pytest.fixture
def auth_headers(user: User, test_settings: Settings) -> dict:
    return auth_headers_for(user, test_settings)


@pytest.fixture
def other_auth_headers(other_user: User, test_settings: Settings) -> dict:
    return auth_headers_for(other_user, test_settings)
