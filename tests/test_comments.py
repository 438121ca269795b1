"""
Tests for Book Comment Endpoints

Tests cover:
- GET /comments?book_id= - Comments on a book, newest first
- POST /comments - Comment on a book
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookhaven.models import Book, User
from bookhaven.services.catalog import STUB_TITLE

COMMENTS_URL = "/api/v1/comments"


class TestComments:
    """Tests for /comments."""

    def test_create_comment(
        self,
        client: TestClient,
        db_session: Session,
        user: User,
        auth_headers: dict,
    ):
        response = client.post(
            COMMENTS_URL,
            json={"book_id": "vol1", "content": "  Loved the ending.  "},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["content"] == "Loved the ending."
        assert data["book_id"] == "vol1"
        assert data["user"] == {"id": user.id, "username": "alice"}
        # Commenting on an unseen book mirrors a placeholder
        assert db_session.get(Book, "vol1").title == STUB_TITLE

    def test_create_comment_requires_auth(self, client: TestClient):
        response = client.post(COMMENTS_URL, json={"book_id": "vol1", "content": "Hi"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_empty_comment(self, client: TestClient, auth_headers: dict):
        response = client.post(
            COMMENTS_URL,
            json={"book_id": "vol1", "content": "   "},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_comments_newest_first(
        self,
        client: TestClient,
        auth_headers: dict,
        other_auth_headers: dict,
    ):
        client.post(COMMENTS_URL, json={"book_id": "vol1", "content": "first"}, headers=auth_headers)
        client.post(COMMENTS_URL, json={"book_id": "vol1", "content": "second"}, headers=other_auth_headers)
        client.post(COMMENTS_URL, json={"book_id": "vol2", "content": "elsewhere"}, headers=auth_headers)

        response = client.get(COMMENTS_URL, params={"book_id": "vol1"})

        assert response.status_code == status.HTTP_200_OK
        comments = response.json()["data"]
        assert [comment["content"] for comment in comments] == ["second", "first"]
        assert comments[0]["user"]["username"] == "bob"

    def test_list_comments_requires_book_id(self, client: TestClient):
        response = client.get(COMMENTS_URL)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
