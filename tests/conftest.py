"""
Pytest configuration and shared fixtures.
"""

from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.database import BookRepository
from api.exceptions import NotFoundError, ValidationError
from api.main import create_app
from api.models import BookResponse, missing_fields
from api.news import NewsGateway


class InMemoryBookRepository:
    """Stand-in for BookRepository that keeps books in a dict."""

    def __init__(self):
        self.books: Dict[str, dict] = {}
        self.calls: List[str] = []

    async def ping(self) -> bool:
        return True

    async def list_books(self) -> List[BookResponse]:
        self.calls.append("list_books")
        return [BookResponse(id=book_id, **fields) for book_id, fields in self.books.items()]

    async def create_book(self, title, author, year, genre) -> BookResponse:
        self.calls.append("create_book")
        fields = {"title": title, "author": author, "year": year, "genre": genre}
        missing = missing_fields(fields)
        if missing:
            raise ValidationError(missing)
        book_id = str(ObjectId())
        self.books[book_id] = fields
        return BookResponse(id=book_id, **fields)

    async def update_book(self, book_id, title, author, year, genre) -> BookResponse:
        self.calls.append("update_book")
        fields = {"title": title, "author": author, "year": year, "genre": genre}
        missing = missing_fields(fields)
        if missing:
            raise ValidationError(missing)
        if book_id not in self.books:
            raise NotFoundError(book_id)
        self.books[book_id] = fields
        return BookResponse(id=book_id, **fields)

    async def delete_book(self, book_id) -> None:
        self.calls.append("delete_book")
        if book_id not in self.books:
            raise NotFoundError(book_id)
        del self.books[book_id]


@pytest.fixture
def test_settings():
    """Settings that never read the developer's .env file."""
    return APIConfig(_env_file=None, news_api_key="test-news-key")


@pytest.fixture
def book_repository():
    """In-memory book repository."""
    return InMemoryBookRepository()


@pytest.fixture
def mock_news_gateway():
    """Mock news gateway."""
    return AsyncMock(spec=NewsGateway)


@pytest.fixture
def client(book_repository, mock_news_gateway, test_settings):
    """Test client wired to the in-memory repository and the mock gateway."""
    app = create_app(
        book_repository=book_repository,
        news_gateway=mock_news_gateway,
        settings=test_settings
    )
    return TestClient(app)


@pytest.fixture
def failing_client(mock_news_gateway, test_settings):
    """Test client whose repository is a mock, for driving store failures."""
    repository = AsyncMock(spec=BookRepository)
    app = create_app(
        book_repository=repository,
        news_gateway=mock_news_gateway,
        settings=test_settings
    )
    return TestClient(app), repository


@pytest.fixture
def mock_collection():
    """Mock Motor collection; ``find`` is synchronous and returns a cursor."""
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    collection.database.command = AsyncMock(return_value={"ok": 1.0})
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    return collection


@pytest.fixture
def sample_book():
    """Sample book payload."""
    return {"title": "Dune", "author": "Herbert", "year": 1965, "genre": "SciFi"}


@pytest.fixture
def sample_upstream_payload():
    """A NewsAPI top-headlines response body."""
    return {
        "status": "ok",
        "totalResults": 2,
        "articles": [
            {
                "source": {"id": "bbc-news", "name": "BBC News"},
                "author": "BBC",
                "title": "Headline one",
                "description": "First story",
                "url": "https://example.com/one",
                "urlToImage": "https://example.com/one.jpg",
                "publishedAt": "2024-01-15T10:30:00Z",
                "content": "Full text one"
            },
            {
                "source": {"id": None, "name": "Reuters"},
                "author": None,
                "title": "Headline two",
                "description": None,
                "url": "https://example.com/two",
                "urlToImage": None,
                "publishedAt": "2024-01-15T11:00:00Z",
                "content": None
            }
        ]
    }
