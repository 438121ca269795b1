"""
Tests for Book List Endpoints

Tests cover:
- GET/POST /booklists - Own lists and list creation
- GET/DELETE /booklists/{list_id} - One list
- POST/DELETE /booklists/{list_id}/books - Membership
- Ownership: other members' lists answer 404
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookhaven.exceptions import ConflictError, NotFoundError
from bookhaven.models import Book, BookListEntry, User
from bookhaven.schemas.book_list import AddBookRequest
from bookhaven.services import book_lists as lists_service

LISTS_URL = "/api/v1/booklists"

DUNE = {
    "book_id": "B1hSG45JCX4C",
    "title": "Dune",
    "authors": "Frank Herbert",
    "image": "http://books.google.com/dune.jpg",
    "categories": ["Science Fiction"],
}


def list_url(list_id) -> str:
    return f"{LISTS_URL}/{list_id}"


def books_url(list_id) -> str:
    return f"{LISTS_URL}/{list_id}/books"


@pytest.fixture
def list_id(db_session: Session, user: User) -> int:
    """Id of the user's "want to read" list."""
    return lists_service.get_user_lists(db_session, user)[0].id


# =============================================================================
# Test: Lists
# =============================================================================


class TestLists:
    """Tests for creating, reading and deleting lists."""

    def test_list_own_lists(self, client: TestClient, auth_headers: dict):
        response = client.get(LISTS_URL, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        names = [book_list["name"] for book_list in response.json()["data"]]
        assert names == ["want to read", "currently reading", "read"]

    def test_requires_auth(self, client: TestClient):
        response = client.get(LISTS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_list(self, client: TestClient, auth_headers: dict):
        response = client.post(LISTS_URL, json={"name": "  Summer 2025  "}, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["name"] == "Summer 2025"
        assert data["entries"] == []

    def test_create_list_blank_name(self, client: TestClient, auth_headers: dict):
        response = client.post(LISTS_URL, json={"name": "   "}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_duplicate_list(self, client: TestClient, auth_headers: dict):
        response = client.post(LISTS_URL, json={"name": "read"}, headers=auth_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "A list with this name already exists"

    def test_same_name_for_different_users(
        self,
        client: TestClient,
        auth_headers: dict,
        other_auth_headers: dict,
    ):
        first = client.post(LISTS_URL, json={"name": "Favorites"}, headers=auth_headers)
        second = client.post(LISTS_URL, json={"name": "Favorites"}, headers=other_auth_headers)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED

    def test_get_list(self, client: TestClient, auth_headers: dict, list_id: int):
        response = client.get(list_url(list_id), headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "want to read"

    def test_get_other_users_list(self, client: TestClient, other_auth_headers: dict, list_id: int):
        response = client.get(list_url(list_id), headers=other_auth_headers)

        # Not 403: other members' lists look like missing lists
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "List not found"

    def test_non_numeric_list_id(self, client: TestClient, auth_headers: dict):
        response = client.get(list_url("abc"), headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_list(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        list_id: int,
    ):
        client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        response = client.delete(list_url(list_id), headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "List deleted"
        assert client.get(list_url(list_id), headers=auth_headers).status_code == 404
        remaining = db_session.execute(
            select(func.count(BookListEntry.id)).where(BookListEntry.book_list_id == list_id)
        ).scalar()
        assert remaining == 0
        # The mirrored book outlives the list
        assert db_session.get(Book, DUNE["book_id"]) is not None

    def test_delete_other_users_list(self, client: TestClient, other_auth_headers: dict, list_id: int):
        response = client.delete(list_url(list_id), headers=other_auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Test: Membership
# =============================================================================


class TestListBooks:
    """Tests for adding and removing books."""

    def test_add_book(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        list_id: int,
    ):
        response = client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["book"]["id"] == DUNE["book_id"]
        assert data["book"]["title"] == "Dune"
        assert data["added_at"]

        book = db_session.get(Book, DUNE["book_id"])
        assert book.categories == ["Science Fiction"]
        assert book.average_rating is None

    def test_add_book_twice(self, client: TestClient, auth_headers: dict, list_id: int):
        client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        response = client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "Book is already in this list"

    def test_add_book_missing_title(self, client: TestClient, auth_headers: dict, list_id: int):
        response = client.post(
            books_url(list_id),
            json={"book_id": "x1", "authors": "Someone"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "title: Field required"

    def test_add_book_to_other_users_list(
        self,
        client: TestClient,
        other_auth_headers: dict,
        list_id: int,
    ):
        response = client.post(books_url(list_id), json=DUNE, headers=other_auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_keeps_unsent_fields(
        self,
        client: TestClient,
        db_session: Session,
        user: User,
        auth_headers: dict,
    ):
        want_to_read, _, read = lists_service.get_user_lists(db_session, user)
        client.post(books_url(want_to_read.id), json=DUNE, headers=auth_headers)

        client.post(
            books_url(read.id),
            json={"book_id": DUNE["book_id"], "title": "Dune (Deluxe)", "authors": "Frank Herbert"},
            headers=auth_headers,
        )

        db_session.expire_all()
        book = db_session.get(Book, DUNE["book_id"])
        assert book.title == "Dune (Deluxe)"
        assert book.categories == ["Science Fiction"]
        assert book.image == DUNE["image"]

    def test_add_writes_explicit_null(
        self,
        client: TestClient,
        db_session: Session,
        user: User,
        auth_headers: dict,
    ):
        want_to_read, _, read = lists_service.get_user_lists(db_session, user)
        client.post(books_url(want_to_read.id), json={**DUNE, "average_rating": 3.5}, headers=auth_headers)

        response = client.post(
            books_url(read.id),
            json={**DUNE, "average_rating": None, "image": None},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        db_session.expire_all()
        book = db_session.get(Book, DUNE["book_id"])
        assert book.average_rating is None
        assert book.image is None
        assert book.categories == ["Science Fiction"]

    def test_list_shows_newest_first(self, client: TestClient, auth_headers: dict, list_id: int):
        for i in range(3):
            client.post(
                books_url(list_id),
                json={"book_id": f"vol{i}", "title": f"Book {i}", "authors": "Someone"},
                headers=auth_headers,
            )

        response = client.get(list_url(list_id), headers=auth_headers)

        ids = [entry["book"]["id"] for entry in response.json()["data"]["entries"]]
        assert ids == ["vol2", "vol1", "vol0"]

    def test_remove_book(self, client: TestClient, auth_headers: dict, list_id: int):
        client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        response = client.delete(
            books_url(list_id),
            params={"book_id": DUNE["book_id"]},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        entries = client.get(list_url(list_id), headers=auth_headers).json()["data"]["entries"]
        assert entries == []

    def test_remove_book_not_on_list(self, client: TestClient, auth_headers: dict, list_id: int):
        client.post(books_url(list_id), json=DUNE, headers=auth_headers)

        response = client.delete(
            books_url(list_id),
            params={"book_id": "nope"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Book not found in this list"
        entries = client.get(list_url(list_id), headers=auth_headers).json()["data"]["entries"]
        assert [entry["book"]["id"] for entry in entries] == [DUNE["book_id"]]

    def test_remove_book_requires_book_id(self, client: TestClient, auth_headers: dict, list_id: int):
        response = client.delete(books_url(list_id), headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestListService:
    """Service-level rules for list membership."""

    def test_duplicate_add_writes_nothing(self, db_session: Session, user: User, list_id: int):
        lists_service.add_book(db_session, user, list_id, AddBookRequest(**DUNE))

        with pytest.raises(ConflictError):
            lists_service.add_book(
                db_session,
                user,
                list_id,
                AddBookRequest(book_id=DUNE["book_id"], title="Changed", authors="Changed"),
            )

        assert db_session.get(Book, DUNE["book_id"]).title == "Dune"

    def test_other_users_list_is_not_found(self, db_session: Session, other_user: User, list_id: int):
        with pytest.raises(NotFoundError):
            lists_service.get_user_list(db_session, other_user, list_id)

    def test_excluded_book_ids(self, db_session: Session, user: User, other_user: User):
        mine = lists_service.get_user_lists(db_session, user)
        theirs = lists_service.get_user_lists(db_session, other_user)
        lists_service.add_book(db_session, user, mine[0].id, AddBookRequest(**DUNE))
        lists_service.add_book(
            db_session, user, mine[2].id,
            AddBookRequest(book_id="b2", title="Two", authors="A"),
        )
        lists_service.add_book(
            db_session, other_user, theirs[0].id,
            AddBookRequest(book_id="b3", title="Three", authors="B"),
        )

        assert lists_service.excluded_book_ids(db_session, user.id) == {DUNE["book_id"], "b2"}
