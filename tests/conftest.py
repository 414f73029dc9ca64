"""
Pytest configuration and shared fixtures.
"""

from typing import Any, Dict, List

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.database import BookStore, parse_object_id
from api.errors import NotFound, StoreUnavailable
from api.main import create_app
from api.validation import from_document
from api.weather import WeatherGateway


class InMemoryBookStore(BookStore):
    """BookStore double that keeps documents in a dict keyed by ObjectId."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.unavailable = False

    def _check_available(self):
        if self.unavailable:
            raise StoreUnavailable("store is down")

    def _require(self, book_id: str) -> ObjectId:
        object_id = parse_object_id(book_id)
        if object_id is None or object_id not in self.documents:
            raise NotFound(book_id)
        return object_id

    async def list_all(self) -> List[Dict[str, Any]]:
        self._check_available()
        return [from_document(document) for document in self.documents.values()]

    async def get_by_id(self, book_id: str) -> Dict[str, Any]:
        self._check_available()
        return from_document(self.documents[self._require(book_id)])

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        self._check_available()
        stored = dict(document, _id=ObjectId())
        self.documents[stored["_id"]] = stored
        return from_document(stored)

    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._check_available()
        object_id = self._require(book_id)
        self.documents[object_id].update(fields)
        return from_document(self.documents[object_id])

    async def delete_by_id(self, book_id: str) -> None:
        self._check_available()
        del self.documents[self._require(book_id)]

    async def health_check(self) -> Dict:
        if self.unavailable:
            return {"status": "unhealthy", "error": "store is down"}
        return {"status": "healthy", "books_count": len(self.documents)}


@pytest.fixture
def settings():
    """Configuration that never touches real services."""
    return APIConfig(
        mongo_uri="mongodb://localhost:27017/bookstore_test",
        weather_api_key="test-weather-key",
        weather_api_url="https://weather.test/data/2.5/weather",
        log_format="console"
    )


@pytest.fixture
def book_store():
    """Empty in-memory book store."""
    return InMemoryBookStore()


@pytest.fixture
def paris_weather_payload():
    """Upstream payload for Paris, trimmed to the fields that matter."""
    return {
        "name": "Paris",
        "main": {"temp": 18, "humidity": 60},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}]
    }


@pytest.fixture
def weather_requests():
    """Requests seen by the mocked weather API."""
    return []


@pytest.fixture
def weather_handler(paris_weather_payload, weather_requests):
    """Mock transport handler; override in a test module to simulate upstream failures."""
    def handler(request: httpx.Request) -> httpx.Response:
        weather_requests.append(request)
        return httpx.Response(200, json=paris_weather_payload)
    return handler


@pytest.fixture
def weather_gateway(settings, weather_handler):
    """Weather gateway backed by httpx.MockTransport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(weather_handler))
    return WeatherGateway(
        api_key=settings.weather_api_key,
        api_url=settings.weather_api_url,
        client=client
    )


@pytest.fixture
def client(settings, book_store, weather_gateway):
    """Test client wired to the in-memory store and the mocked weather API."""
    app = create_app(settings, book_store=book_store, weather_gateway=weather_gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_book():
    """Valid create payload."""
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "year": 1969,
        "genre": "Science Fiction"
    }
