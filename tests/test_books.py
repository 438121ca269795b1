"""
Tests for the Google Books client and the catalog endpoints.

The client is exercised against httpx.MockTransport, so no test touches
the network. Endpoint tests use the FakeCatalog from conftest.
"""

import httpx
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from bookhaven.exceptions import UpstreamError
from bookhaven.services.google_books import (
    GoogleBooksClient,
    subject_for_genre,
    volume_to_book,
)
from tests.conftest import FakeCatalog, catalog_book

BASE_URL = "https://books.example.test/books/v1"

DUNE_VOLUME = {
    "id": "B1hSG45JCX4C",
    "volumeInfo": {
        "title": "Dune",
        "authors": ["Frank Herbert"],
        "categories": ["Fiction"],
        "description": "Spice.",
        "averageRating": 4.5,
        "imageLinks": {"smallThumbnail": "http://img/s.jpg", "thumbnail": "http://img/t.jpg"},
    },
}


class DictCache:
    """In-memory stand-in for RedisCache."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ttl=None):
        self.data[key] = value
        return True


def make_client(handler, **kwargs) -> GoogleBooksClient:
    return GoogleBooksClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


# =============================================================================
# Test: mapping helpers
# =============================================================================


class TestVolumeMapping:
    def test_volume_to_book(self):
        book = volume_to_book(DUNE_VOLUME)

        assert book == {
            "id": "B1hSG45JCX4C",
            "title": "Dune",
            "authors": "Frank Herbert",
            "image": "http://img/t.jpg",
            "description": "Spice.",
            "categories": ["Fiction"],
            "average_rating": 4.5,
        }

    def test_joins_authors(self):
        book = volume_to_book(
            {"id": "x", "volumeInfo": {"title": "Good Omens", "authors": ["Terry Pratchett", "Neil Gaiman"]}}
        )

        assert book["authors"] == "Terry Pratchett, Neil Gaiman"
        assert book["categories"] == []
        assert book["image"] is None

    def test_skips_untitled(self):
        assert volume_to_book({"id": "x", "volumeInfo": {}}) is None
        assert volume_to_book({"volumeInfo": {"title": "No id"}}) is None

    @pytest.mark.parametrize(
        "genre,subject",
        [("Sci-Fi", "science fiction"), (" Fantasy ", "fantasy"), ("Terror", "horror"), ("Cozy", "cozy")],
    )
    def test_subject_for_genre(self, genre, subject):
        assert subject_for_genre(genre) == subject


# =============================================================================
# Test: GoogleBooksClient
# =============================================================================


class TestGoogleBooksClient:
    def test_search_query_and_paging(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={"totalItems": 57, "items": [DUNE_VOLUME, {"id": "bad", "volumeInfo": {}}]},
            )

        client = make_client(handler)
        result = client.search("dune", category="Fiction", author="Herbert", page=3, limit=10)

        assert seen["path"] == "/books/v1/volumes"
        assert seen["params"]["q"] == "dune subject:Fiction inauthor:Herbert"
        assert seen["params"]["startIndex"] == "20"
        assert seen["params"]["maxResults"] == "10"
        assert result["total"] == 57
        assert [book["id"] for book in result["books"]] == ["B1hSG45JCX4C"]

    def test_search_caps_page_size(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"totalItems": 0})

        result = make_client(handler).search("dune", limit=100)

        assert seen["params"]["maxResults"] == "40"
        assert result == {"books": [], "total": 0}

    def test_api_key_is_sent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=DUNE_VOLUME)

        make_client(handler, api_key="k-123").get_volume("B1hSG45JCX4C")

        assert seen["params"]["key"] == "k-123"

    def test_get_volume(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/books/v1/volumes/B1hSG45JCX4C"
            return httpx.Response(200, json=DUNE_VOLUME)

        book = make_client(handler).get_volume("B1hSG45JCX4C")

        assert book["title"] == "Dune"

    def test_get_volume_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={"error": {}}))

        assert client.get_volume("missing") is None

    def test_server_error_is_upstream_error(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(UpstreamError):
            client.search("dune")

    def test_connection_error_is_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            make_client(handler).get_volume("B1hSG45JCX4C")

    def test_invalid_json_is_upstream_error(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(UpstreamError):
            client.search("dune")

    def test_search_subject_skips_books_without_authors(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={"items": [DUNE_VOLUME, {"id": "anon", "volumeInfo": {"title": "Beowulf"}}]},
            )

        books = make_client(handler).search_subject("fiction", max_results=6)

        assert seen["params"]["q"] == "subject:fiction"
        assert seen["params"]["maxResults"] == "6"
        assert [book["id"] for book in books] == ["B1hSG45JCX4C"]

    def test_responses_are_cached(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url)
            return httpx.Response(200, json=DUNE_VOLUME)

        client = make_client(handler, cache=DictCache())
        first = client.get_volume("B1hSG45JCX4C")
        second = client.get_volume("B1hSG45JCX4C")

        assert first == second
        assert len(calls) == 1


# =============================================================================
# Test: /books endpoints
# =============================================================================


class TestBooksEndpoints:
    def test_search(self, client: TestClient, fake_catalog: FakeCatalog):
        fake_catalog.books["d1"] = catalog_book("d1", "Dune")
        fake_catalog.books["d2"] = catalog_book("d2", "Dune Messiah")
        fake_catalog.books["h1"] = catalog_book("h1", "The Hobbit")

        response = client.get("/api/v1/books/search", params={"query": "dune", "limit": 1})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert [book["id"] for book in data["books"]] == ["d1"]
        assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}

    def test_search_passes_filters(self, client: TestClient, fake_catalog: FakeCatalog):
        client.get(
            "/api/v1/books/search",
            params={"query": "dune", "category": "Fiction", "author": "Herbert", "page": 2},
        )

        assert fake_catalog.search_calls == [
            {"query": "dune", "category": "Fiction", "author": "Herbert", "page": 2, "limit": 20}
        ]

    def test_search_requires_query(self, client: TestClient):
        response = client.get("/api/v1/books/search", params={"query": "   "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Query is required"

    def test_search_limit_too_large(self, client: TestClient):
        response = client.get("/api/v1/books/search", params={"query": "dune", "limit": 41})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_catalog_failure(self, client: TestClient, fake_catalog: FakeCatalog):
        fake_catalog.unavailable = True

        response = client.get("/api/v1/books/search", params={"query": "dune"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Book catalog unavailable"

    def test_get_book(self, client: TestClient, fake_catalog: FakeCatalog):
        fake_catalog.books["d1"] = catalog_book("d1", "Dune", "Frank Herbert")

        response = client.get("/api/v1/books/d1")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["authors"] == "Frank Herbert"

    def test_get_book_not_found(self, client: TestClient):
        response = client.get("/api/v1/books/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Book not found"
