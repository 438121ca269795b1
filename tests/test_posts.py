"""
Tests for Post Endpoints

Tests cover:
- GET/POST /posts - Paginated feed and post creation
- GET/PUT/DELETE /posts/{post_id} - One post, author-only edits
- GET/POST /posts/{post_id}/comments - Discussion under a post
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookhaven.models import PostComment, User

POSTS_URL = "/api/v1/posts"


def post_url(post_id) -> str:
    return f"{POSTS_URL}/{post_id}"


def comments_url(post_id) -> str:
    return f"{POSTS_URL}/{post_id}/comments"


@pytest.fixture
def post_id(client: TestClient, auth_headers: dict) -> int:
    response = client.post(
        POSTS_URL,
        json={
            "title": "Just finished Dune",
            "content": "What a world.",
            "book_title": "Dune",
            "book_author": "Frank Herbert",
            "book_id": "B1hSG45JCX4C",
        },
        headers=auth_headers,
    )
    return response.json()["data"]["id"]


# =============================================================================
# Test: Posts
# =============================================================================


class TestPosts:
    """Tests for /posts."""

    def test_create_post(self, client: TestClient, user: User, auth_headers: dict):
        response = client.post(
            POSTS_URL,
            json={"title": "Hello", "content": "First post."},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["title"] == "Hello"
        assert data["book_title"] is None
        assert data["user"] == {"id": user.id, "username": "alice"}
        assert data["comment_count"] == 0

    def test_create_post_requires_title(self, client: TestClient, auth_headers: dict):
        response = client.post(POSTS_URL, json={"content": "No title"}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "title: Field required"

    def test_create_post_requires_auth(self, client: TestClient):
        response = client.post(POSTS_URL, json={"title": "Hello", "content": "Hi"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_posts_paginated(self, client: TestClient, auth_headers: dict):
        for i in range(3):
            client.post(POSTS_URL, json={"title": f"Post {i}", "content": "..."}, headers=auth_headers)

        response = client.get(POSTS_URL, params={"page": 1, "limit": 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert [post["title"] for post in data["posts"]] == ["Post 2", "Post 1"]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}

    def test_list_posts_by_user(
        self,
        client: TestClient,
        other_user: User,
        auth_headers: dict,
        other_auth_headers: dict,
    ):
        client.post(POSTS_URL, json={"title": "Mine", "content": "..."}, headers=auth_headers)
        client.post(POSTS_URL, json={"title": "Theirs", "content": "..."}, headers=other_auth_headers)

        response = client.get(POSTS_URL, params={"user_id": other_user.id})

        data = response.json()["data"]
        assert [post["title"] for post in data["posts"]] == ["Theirs"]
        assert data["pagination"]["total"] == 1

    def test_list_posts_limit_too_large(self, client: TestClient):
        response = client.get(POSTS_URL, params={"limit": 51})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_get_post(self, client: TestClient, post_id: int):
        response = client.get(post_url(post_id))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["book_author"] == "Frank Herbert"

    def test_get_missing_post(self, client: TestClient):
        response = client.get(post_url(9999))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Post not found"

    def test_update_post(self, client: TestClient, auth_headers: dict, post_id: int):
        response = client.put(
            post_url(post_id),
            json={"content": "Still thinking about it."},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["content"] == "Still thinking about it."
        assert data["title"] == "Just finished Dune"

    def test_update_clears_optional_field(self, client: TestClient, auth_headers: dict, post_id: int):
        response = client.put(
            post_url(post_id),
            json={"book_id": None, "title": "Dune, revisited"},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert data["book_id"] is None
        assert data["title"] == "Dune, revisited"

    def test_update_empty_body(self, client: TestClient, auth_headers: dict, post_id: int):
        response = client.put(post_url(post_id), json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_other_users_post(
        self,
        client: TestClient,
        other_auth_headers: dict,
        post_id: int,
    ):
        response = client.put(post_url(post_id), json={"title": "Mine now"}, headers=other_auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "You can only modify your own posts"

    def test_delete_post(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        other_auth_headers: dict,
        post_id: int,
    ):
        client.post(comments_url(post_id), json={"content": "Great read"}, headers=other_auth_headers)

        response = client.delete(post_url(post_id), headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert client.get(post_url(post_id)).status_code == status.HTTP_404_NOT_FOUND
        remaining = db_session.execute(
            select(func.count(PostComment.id)).where(PostComment.post_id == post_id)
        ).scalar()
        assert remaining == 0

    def test_delete_other_users_post(
        self,
        client: TestClient,
        other_auth_headers: dict,
        post_id: int,
    ):
        response = client.delete(post_url(post_id), headers=other_auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Test: Post Comments
# =============================================================================


class TestPostComments:
    """Tests for /posts/{post_id}/comments."""

    def test_comment_on_post(
        self,
        client: TestClient,
        other_user: User,
        other_auth_headers: dict,
        post_id: int,
    ):
        response = client.post(
            comments_url(post_id),
            json={"content": "Agreed!"},
            headers=other_auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["post_id"] == post_id
        assert data["user"]["id"] == other_user.id

    def test_comments_oldest_first(
        self,
        client: TestClient,
        auth_headers: dict,
        other_auth_headers: dict,
        post_id: int,
    ):
        client.post(comments_url(post_id), json={"content": "one"}, headers=other_auth_headers)
        client.post(comments_url(post_id), json={"content": "two"}, headers=auth_headers)

        response = client.get(comments_url(post_id))

        assert [c["content"] for c in response.json()["data"]] == ["one", "two"]
        assert client.get(post_url(post_id)).json()["data"]["comment_count"] == 2

    def test_comment_on_missing_post(self, client: TestClient, auth_headers: dict):
        response = client.post(comments_url(9999), json={"content": "Hello?"}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_comments_missing_post(self, client: TestClient):
        response = client.get(comments_url(9999))

        assert response.status_code == status.HTTP_404_NOT_FOUND
